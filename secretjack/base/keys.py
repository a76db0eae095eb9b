"""Secret key namespacing.

Callers address secrets as ``vendor/subkey``. The vendor groups secrets by
integration; the subkey names the value inside that vendor's secret.
"""

from __future__ import annotations

from dataclasses import dataclass

from secretjack.base.exceptions import MalformedKeyError

SEPARATOR = "/"


@dataclass(frozen=True)
class SecretKey:
    """A parsed ``vendor/subkey`` pair."""

    vendor: str
    subkey: str

    def __str__(self) -> str:
        return f"{self.vendor}{SEPARATOR}{self.subkey}"


def parse_secret_key(raw_key: str) -> SecretKey:
    """Split a raw key into vendor and subkey.

    Surrounding whitespace and leading/trailing slashes are trimmed, then the
    key is split on the first remaining slash. Anything after that slash
    (further slashes included) belongs to the subkey.

    Args:
        raw_key: Caller supplied key, e.g. ``"magento/tfa/OTP_SHARED_SECRET"``.

    Returns:
        The parsed :class:`SecretKey`.

    Raises:
        MalformedKeyError: If no separator remains after trimming.
    """
    if not isinstance(raw_key, str):
        raise MalformedKeyError(f"Secret key must be a string, got {type(raw_key).__name__}")
    trimmed = raw_key.strip().strip(SEPARATOR)
    vendor, sep, subkey = trimmed.partition(SEPARATOR)
    if not sep or not vendor or not subkey:
        raise MalformedKeyError(f"Secret key '{raw_key}' is not of the form vendor/subkey")
    return SecretKey(vendor=vendor, subkey=subkey)
