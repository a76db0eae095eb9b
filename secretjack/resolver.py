"""
Secret resolver facade.

:class:`SecretResolver` is what collaborators call: it answers
``get_secret_value("vendor/key")`` from the encrypted cache when it can and
asks the configured backend otherwise. Missing or unreachable secrets come
back as ``None``; successful lookups are cached for the life of the
context, failed ones are not.
"""

from __future__ import annotations

from secretjack.base import SecretBackendBlueprint, parse_secret_key
from secretjack.base.async_support import async_wrap
from secretjack.base.context import SecretContext
from secretjack.base.crypto import decrypt, encrypt
from secretjack.base.exceptions import MalformedKeyError
from secretjack.base.logger import SecretjackLogger, sj_logger


class SecretResolver:
    """Cache-first secret lookup over a single backend.

    Attributes:
        backend: Backend consulted on cache misses.
        context: Shared cache and crypto context.
    """

    def __init__(
        self,
        backend: SecretBackendBlueprint,
        context: SecretContext,
        logger: SecretjackLogger | None = None,
    ) -> None:
        self.backend = backend
        self.context = context
        self.logger = logger or sj_logger

    def get_encrypted_value(self, raw_key: str) -> str | None:
        """Return the cached ciphertext for *raw_key*, fetching it on a miss.

        Args:
            raw_key: Key of the form ``vendor/subkey``; surrounding whitespace
                and slashes are ignored.

        Returns:
            The encrypted value, or ``None`` if the key is malformed or the
            backend could not supply it.
        """
        try:
            key = parse_secret_key(raw_key)
        except MalformedKeyError as e:
            self.logger.debug(str(e), backend=self.backend.name, operation="parse_key")
            return None

        cache = self.context.cache
        with cache.key_lock(key.subkey):
            cached = cache.get(key.subkey)
            if cached is not None:
                return cached

            result = self.backend.resolve(key)
            if not result.found or result.value is None:
                self.logger.debug(
                    f"No value resolved for key {key} ({result.status.value}: {result.reason})",
                    backend=self.backend.name, operation="resolve", key=str(key),
                )
                return None

            encrypted = encrypt(result.value, self.context.crypto)
            cache.put(key.subkey, encrypted)
            return cache.get(key.subkey)

    def get_secret_value(self, raw_key: str) -> str | None:
        """Return the plaintext secret for *raw_key*, or ``None``.

        Only a broken backend configuration raises; every lookup failure
        degrades to ``None``.
        """
        encrypted = self.get_encrypted_value(raw_key)
        if encrypted is None:
            return None
        return self.decrypt(encrypted)

    def decrypt(self, encrypted_value: str) -> str:
        """Decrypt a value returned by :meth:`get_encrypted_value`."""
        return decrypt(encrypted_value, self.context.crypto)

    aget_secret_value = async_wrap(get_secret_value)
    aget_encrypted_value = async_wrap(get_encrypted_value)
