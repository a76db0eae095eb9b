"""
Secretjack exception hierarchy.

Everything raised by the library inherits from :class:`SecretjackError`.
Only :class:`ConfigurationError` is meant to reach callers of the
resolver; the lookup errors are translated into a
:class:`~secretjack.base.backend.ResolveResult` at the backend boundary.
"""

from __future__ import annotations


# ── Base ──────────────────────────────────────────────────────────────
class SecretjackError(Exception):
    """Root exception for all Secretjack errors."""


# ── Fatal ─────────────────────────────────────────────────────────────
class ConfigurationError(SecretjackError):
    """Backend client cannot be constructed; the backend is unusable."""


# ── Keys ──────────────────────────────────────────────────────────────
class MalformedKeyError(SecretjackError, ValueError):
    """Secret key has no ``vendor/`` namespace after trimming."""


# ── Lookups ───────────────────────────────────────────────────────────
class SecretLookupError(SecretjackError):
    """Base exception for a single failed secret lookup.

    Args:
        message: Human-readable description; never contains the secret.
        code: Short backend error code, e.g. ``ResourceNotFoundException``.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class SecretNotFoundError(SecretLookupError):
    """Backend confirms the secret is absent or access is denied."""


class SecretParseError(SecretLookupError):
    """Backend response does not have the expected structure."""


class TransientBackendError(SecretLookupError):
    """Any other failure while talking to the backend."""
