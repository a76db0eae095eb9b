"""Local credentials file implementation of the secret backend blueprint.

The file holds one ``vendor/subkey=value`` entry per line::

    # comments and blank lines are ignored
    magento/tfa/OTP_SHARED_SECRET=ABCDEFGHIJKLMNOP
    vendor1/api_key=abc=def
"""

from __future__ import annotations

from pathlib import Path

from secretjack.base import ResolveResult, SecretBackendBlueprint, SecretKey
from secretjack.base.client_handle import ClientHandle
from secretjack.base.config import FileBackendConfig
from secretjack.base.exceptions import (
    ConfigurationError,
    SecretLookupError,
    SecretNotFoundError,
)
from secretjack.base.logger import SecretjackLogger, sj_logger


class FileStorage(SecretBackendBlueprint):
    """Secrets read from a local ``.credentials`` file.

    The file is read once, on construction; edits made afterwards are not
    picked up by this instance.
    """

    name = "file"

    def __init__(self, config: FileBackendConfig, logger: SecretjackLogger | None = None):
        self.path = Path(config.path)
        self.logger = logger or sj_logger
        self._entries = ClientHandle(self._load, f"credentials file backend from {self.path}")
        self._entries.get()

    def _load(self) -> dict[str, str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Unable to read credentials file {self.path}: {e}") from e
        return parse_credentials(text)

    def fetch_secret(self, key: SecretKey) -> str:
        """Return the value for *key* from the loaded file.

        Raises:
            SecretNotFoundError: If the file has no entry for *key*.
        """
        value = self._entries.get().get(str(key))
        if value is None:
            raise SecretNotFoundError(
                f"Key {key} not found in credentials file {self.path}", code="KeyNotInFile"
            )
        return value

    def resolve(self, key: SecretKey) -> ResolveResult:
        try:
            return ResolveResult.success(self.fetch_secret(key))
        except SecretLookupError as e:
            self.logger.debug(str(e), backend=self.name, operation="resolve", key=str(key))
            return ResolveResult.from_error(e)


def parse_credentials(text: str) -> dict[str, str]:
    """Parse ``vendor/subkey=value`` lines into a dict.

    Lines without ``=`` are skipped. Leading/trailing slashes and whitespace
    around the key are trimmed; the value is everything after the first ``=``
    with the line ending removed.
    """
    entries: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        name, sep, value = line.partition("=")
        if not sep:
            continue
        name = name.strip().strip("/")
        if name:
            entries.setdefault(name, value)
    return entries
