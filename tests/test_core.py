"""Tests for core infrastructure modules."""

from unittest.mock import MagicMock
import asyncio
import base64
import logging
import random
import string
import threading
import pytest
from pydantic import ValidationError

from secretjack.base import ResolveResult, ResolveStatus, SecretKey, parse_secret_key
from secretjack.base.async_support import async_wrap
from secretjack.base.cache import SecretCache
from secretjack.base.client_handle import ClientHandle
from secretjack.base.config import (
    AWSBackendConfig,
    CryptoConfig,
    FileBackendConfig,
    GCPBackendConfig,
    validate_config,
)
from secretjack.base.context import SecretContext
from secretjack.base.crypto import CryptoContext, decrypt, encrypt
from secretjack.base.exceptions import (
    ConfigurationError,
    MalformedKeyError,
    SecretLookupError,
    SecretNotFoundError,
    SecretParseError,
    TransientBackendError,
)
from secretjack.base.logger import SecretjackLogger, StructuredFormatter
from secretjack.base.payload import parse_secret_payload


KEY = base64.b64encode(b"k" * 32).decode()
IV = base64.b64encode(b"i" * 16).decode()


# ══════════════════════════════════════════════════════════════════════
# Keys
# ══════════════════════════════════════════════════════════════════════

class TestParseSecretKey:
    def test_simple(self):
        assert parse_secret_key("vendor1/keyA") == SecretKey("vendor1", "keyA")

    def test_trims_whitespace_and_slashes(self):
        assert parse_secret_key("  /vendor1/keyA/  ") == SecretKey("vendor1", "keyA")

    def test_splits_on_first_separator(self):
        key = parse_secret_key("magento/tfa/OTP_SHARED_SECRET")
        assert key.vendor == "magento"
        assert key.subkey == "tfa/OTP_SHARED_SECRET"

    def test_str(self):
        assert str(SecretKey("a", "b/c")) == "a/b/c"

    @pytest.mark.parametrize("raw", ["novendorkey", "", "/", "//", "  /keyonly/ "])
    def test_malformed(self, raw):
        with pytest.raises(MalformedKeyError):
            parse_secret_key(raw)

    def test_non_string(self):
        with pytest.raises(MalformedKeyError):
            parse_secret_key(None)  # type: ignore[arg-type]


# ══════════════════════════════════════════════════════════════════════
# Crypto
# ══════════════════════════════════════════════════════════════════════

class TestCrypto:
    def test_round_trip_generated(self):
        rng = random.Random(20261019)
        alphabet = (
            string.printable
            + "üñïçødé✓秘密"
            + "\U0001F512\U0001F600\U00010348"
        )
        ctx = CryptoContext.generate()
        for length in range(65):
            for _ in range(5):
                plaintext = "".join(rng.choice(alphabet) for _ in range(length))
                assert decrypt(encrypt(plaintext, ctx), ctx) == plaintext

    def test_round_trip_block_boundaries(self):
        ctx = CryptoContext(key=b"k" * 32, iv=b"i" * 16)
        for plaintext in ("", "x" * 15, "x" * 16, "x" * 17, "x" * 32):
            assert decrypt(encrypt(plaintext, ctx), ctx) == plaintext

    def test_ciphertext_is_not_plaintext(self):
        ctx = CryptoContext.generate()
        assert "hunter2" not in encrypt("hunter2", ctx)

    def test_deterministic_for_fixed_context(self):
        ctx = CryptoContext(key=b"k" * 32, iv=b"i" * 16)
        assert encrypt("value", ctx) == encrypt("value", ctx)

    def test_other_context_cannot_decrypt(self):
        ctx_a = CryptoContext(key=b"a" * 32, iv=b"i" * 16)
        ctx_b = CryptoContext(key=b"b" * 32, iv=b"i" * 16)
        ciphertext = encrypt("value", ctx_a)
        try:
            result = decrypt(ciphertext, ctx_b)
        except ValueError:
            return
        assert result != "value"

    @pytest.mark.parametrize("key,iv", [(b"short", b"i" * 16), (b"k" * 32, b"short")])
    def test_invalid_lengths(self, key, iv):
        with pytest.raises(ValueError):
            CryptoContext(key=key, iv=iv)

    def test_repr_hides_key_material(self):
        ctx = CryptoContext(key=b"k" * 32, iv=b"i" * 16)
        assert "kkkk" not in repr(ctx)


# ══════════════════════════════════════════════════════════════════════
# Cache
# ══════════════════════════════════════════════════════════════════════

class TestSecretCache:
    def test_get_missing(self):
        assert SecretCache().get("nope") is None

    def test_put_get(self):
        cache = SecretCache()
        cache.put("keyA", "enc")
        assert cache.get("keyA") == "enc"
        assert "keyA" in cache
        assert len(cache) == 1

    def test_first_write_wins(self):
        cache = SecretCache()
        cache.put("keyA", "first")
        cache.put("keyA", "second")
        assert cache.get("keyA") == "first"

    def test_key_lock_serializes_same_key(self):
        cache = SecretCache()
        inside = []
        overlap = []

        def worker():
            with cache.key_lock("keyA"):
                if inside:
                    overlap.append(True)
                inside.append(True)
                threading.Event().wait(0.01)
                inside.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert overlap == []

    def test_key_locks_released(self):
        cache = SecretCache()
        for i in range(1000):
            with cache.key_lock(f"key{i}"):
                pass
        assert cache._key_locks == {}
        assert len(cache) == 0

    def test_key_lock_released_on_error(self):
        cache = SecretCache()
        with pytest.raises(RuntimeError):
            with cache.key_lock("keyA"):
                raise RuntimeError("backend blew up")
        assert cache._key_locks == {}

    def test_key_lock_kept_while_waiting(self):
        cache = SecretCache()
        entered = threading.Event()

        def waiter():
            with cache.key_lock("keyA"):
                entered.set()

        with cache.key_lock("keyA"):
            thread = threading.Thread(target=waiter)
            thread.start()
            while cache._key_locks["keyA"].holders < 2:
                threading.Event().wait(0.001)
            assert not entered.is_set()
        thread.join(1)
        assert entered.is_set()
        assert cache._key_locks == {}


# ══════════════════════════════════════════════════════════════════════
# Payload
# ══════════════════════════════════════════════════════════════════════

class TestParseSecretPayload:
    def test_success(self):
        assert parse_secret_payload('{"keyA": "v", "other": "x"}', "keyA") == "v"

    @pytest.mark.parametrize(
        "payload,expected",
        [
            ('{"pin": 1234}', "1234"),
            ('{"pin": 0}', "0"),
            ('{"pin": 12.5}', "12.5"),
            ('{"pin": true}', "true"),
            ('{"pin": false}', "false"),
        ],
    )
    def test_scalar_entries_returned_as_text(self, payload, expected):
        assert parse_secret_payload(payload, "pin") == expected

    @pytest.mark.parametrize(
        "payload",
        [
            None, 42, "not json", '["a", "b"]', '{"other": "x"}',
            '{"keyA": null}', '{"keyA": [1]}', '{"keyA": {"a": 1}}',
        ],
    )
    def test_structural_failures(self, payload):
        with pytest.raises(SecretParseError):
            parse_secret_payload(payload, "keyA")


# ══════════════════════════════════════════════════════════════════════
# Resolve results
# ══════════════════════════════════════════════════════════════════════

class TestResolveResultFromError:
    def test_not_found(self):
        result = ResolveResult.from_error(SecretNotFoundError("missing", code="ResourceNotFoundException"))
        assert result.status is ResolveStatus.NOT_FOUND
        assert result.reason == "ResourceNotFoundException"

    def test_parse_error_uses_message(self):
        result = ResolveResult.from_error(SecretParseError("Secret payload is not valid JSON"))
        assert result.status is ResolveStatus.PARSE_ERROR
        assert result.reason == "Secret payload is not valid JSON"

    def test_transient(self):
        result = ResolveResult.from_error(TransientBackendError("slow down", code="ThrottlingException"))
        assert result.status is ResolveStatus.TRANSIENT_ERROR
        assert result.reason == "ThrottlingException"

    def test_lookup_errors_share_base(self):
        for cls in (SecretNotFoundError, SecretParseError, TransientBackendError):
            assert issubclass(cls, SecretLookupError)

    def test_repr_hides_value(self):
        assert "s3cret" not in repr(ResolveResult.success("s3cret"))


# ══════════════════════════════════════════════════════════════════════
# Config
# ══════════════════════════════════════════════════════════════════════

class TestAWSBackendConfig:
    def test_explicit_values(self):
        cfg = AWSBackendConfig(region_name="us-west-2", profile_name="qa")
        assert cfg.region_name == "us-west-2"
        assert cfg.profile_name == "qa"
        assert cfg.namespace_prefix == "mftf"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
        monkeypatch.setenv("AWS_PROFILE", "ci")
        cfg = AWSBackendConfig()
        assert cfg.region_name == "eu-west-1"
        assert cfg.profile_name == "ci"

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            AWSBackendConfig(region="us-east-1")


class TestGCPBackendConfig:
    def test_explicit_values(self):
        cfg = GCPBackendConfig(project_id="my-proj")
        assert cfg.project_id == "my-proj"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "env-proj")
        cfg = GCPBackendConfig()
        assert cfg.project_id == "env-proj"

    def test_project_required(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
        monkeypatch.delenv("GCLOUD_PROJECT", raising=False)
        with pytest.raises(ValidationError):
            GCPBackendConfig()


class TestFileBackendConfig:
    def test_env_fallback(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SECRETJACK_CREDENTIALS_FILE", str(tmp_path / "creds"))
        assert FileBackendConfig().path == tmp_path / "creds"


class TestCryptoConfig:
    def test_explicit_key(self):
        ctx = CryptoConfig(key=KEY, iv=IV).to_context()
        assert ctx.key == b"k" * 32
        assert ctx.iv == b"i" * 16

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("SECRETJACK_CRYPTO_KEY", KEY)
        monkeypatch.setenv("SECRETJACK_CRYPTO_IV", IV)
        assert CryptoConfig().to_context().key == b"k" * 32

    def test_generates_when_unset(self, monkeypatch):
        monkeypatch.delenv("SECRETJACK_CRYPTO_KEY", raising=False)
        monkeypatch.delenv("SECRETJACK_CRYPTO_IV", raising=False)
        ctx = CryptoConfig().to_context()
        assert len(ctx.key) == 32
        assert len(ctx.iv) == 16

    def test_key_without_iv(self, monkeypatch):
        monkeypatch.delenv("SECRETJACK_CRYPTO_IV", raising=False)
        with pytest.raises(ValidationError):
            CryptoConfig(key=KEY)

    def test_wrong_length(self):
        with pytest.raises(ValidationError):
            CryptoConfig(key=IV, iv=IV)

    def test_invalid_base64(self):
        with pytest.raises(ValidationError):
            CryptoConfig(key="not base64!!", iv=IV)


class TestValidateConfig:
    def test_aws(self):
        cfg = validate_config("aws", {"region_name": "us-east-1"})
        assert isinstance(cfg, AWSBackendConfig)

    def test_file(self, tmp_path):
        cfg = validate_config("file", {"path": str(tmp_path)})
        assert isinstance(cfg, FileBackendConfig)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="No config model"):
            validate_config("vault", {"key": "val"})


# ══════════════════════════════════════════════════════════════════════
# Context
# ══════════════════════════════════════════════════════════════════════

class TestSecretContext:
    def test_from_config(self):
        ctx = SecretContext.from_config(CryptoConfig(key=KEY, iv=IV))
        assert ctx.crypto.key == b"k" * 32
        assert len(ctx.cache) == 0

    def test_contexts_do_not_share_cache(self):
        a = SecretContext(crypto=CryptoContext.generate())
        b = SecretContext(crypto=CryptoContext.generate())
        a.cache.put("keyA", "enc")
        assert b.cache.get("keyA") is None


# ══════════════════════════════════════════════════════════════════════
# Client handle
# ══════════════════════════════════════════════════════════════════════

class TestClientHandle:
    def test_created_once(self):
        factory = MagicMock(return_value="client")
        handle = ClientHandle(factory, "test client")
        assert not handle.initialized
        assert handle.get() == "client"
        assert handle.get() == "client"
        factory.assert_called_once()
        assert handle.initialized

    def test_none_is_configuration_error(self):
        handle = ClientHandle(lambda: None, "test client")
        with pytest.raises(ConfigurationError, match="Unable to create test client"):
            handle.get()

    def test_factory_exception_is_configuration_error(self):
        def boom():
            raise RuntimeError("no credentials")

        handle = ClientHandle(boom, "test client")
        with pytest.raises(ConfigurationError, match="no credentials"):
            handle.get()


# ══════════════════════════════════════════════════════════════════════
# Logger
# ══════════════════════════════════════════════════════════════════════

class TestSecretjackLogger:
    def test_log_operation(self, capfd):
        logger = SecretjackLogger("test_sj", verbose=True)
        logger.info("test message", backend="aws", operation="resolve", key="mftf/v/k")
        captured = capfd.readouterr()
        assert "test message" in captured.err
        assert "mftf/v/k" in captured.err

    def test_debug_only_when_verbose(self, capfd):
        logger = SecretjackLogger("test_sj_quiet", verbose=False)
        logger.logger.setLevel(logging.DEBUG)
        logger.debug("hidden diagnostic")
        assert "hidden diagnostic" not in capfd.readouterr().err

        logger.set_verbose(True)
        logger.debug("shown diagnostic")
        assert "shown diagnostic" in capfd.readouterr().err

    def test_verbose_from_env(self, monkeypatch):
        monkeypatch.setenv("SECRETJACK_VERBOSE", "true")
        assert SecretjackLogger("test_sj_env").verbose is True

    def test_structured_formatter(self):
        fmt = StructuredFormatter()
        record = logging.LogRecord(
            name="test", level=logging.INFO, pathname="", lineno=0,
            msg="hi", args=(), exc_info=None,
        )
        record.backend = "gcp"
        record.request_id = "abc"
        output = fmt.format(record)
        assert '"backend": "gcp"' in output
        assert '"request_id": "abc"' in output


# ══════════════════════════════════════════════════════════════════════
# Async Support
# ══════════════════════════════════════════════════════════════════════

class TestAsyncWrap:
    def test_basic(self):
        def sync_fn(x: int) -> int:
            return x * 2

        async_fn = async_wrap(sync_fn)
        result = asyncio.run(async_fn(5))
        assert result == 10

    def test_preserves_name(self):
        def my_func():
            pass

        wrapped = async_wrap(my_func)
        assert wrapped.__name__ == "my_func"
