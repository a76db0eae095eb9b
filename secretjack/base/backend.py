"""Secret backend blueprint and the typed lookup result."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass

from secretjack.base.exceptions import (
    SecretLookupError,
    SecretNotFoundError,
    SecretParseError,
)
from secretjack.base.keys import SecretKey


class ResolveStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True)
class ResolveResult:
    """Outcome of a single backend lookup.

    ``value`` holds the plaintext secret only when ``status`` is FOUND.
    ``reason`` carries a short diagnostic (usually a backend error code) for
    every other status.
    """

    status: ResolveStatus
    value: str | None = None
    reason: str | None = None

    def __repr__(self) -> str:
        # Keep plaintext out of reprs and tracebacks.
        return f"ResolveResult(status={self.status.name}, reason={self.reason!r})"

    @property
    def found(self) -> bool:
        return self.status is ResolveStatus.FOUND

    @classmethod
    def success(cls, value: str) -> ResolveResult:
        return cls(ResolveStatus.FOUND, value=value)

    @classmethod
    def not_found(cls, reason: str | None = None) -> ResolveResult:
        return cls(ResolveStatus.NOT_FOUND, reason=reason)

    @classmethod
    def parse_error(cls, reason: str | None = None) -> ResolveResult:
        return cls(ResolveStatus.PARSE_ERROR, reason=reason)

    @classmethod
    def transient(cls, reason: str | None = None) -> ResolveResult:
        return cls(ResolveStatus.TRANSIENT_ERROR, reason=reason)

    @classmethod
    def from_error(cls, error: SecretLookupError) -> ResolveResult:
        """Translate a lookup exception into the matching failure result.

        The error code is the reason when there is one, otherwise the message.
        """
        reason = error.code or str(error)
        if isinstance(error, SecretNotFoundError):
            return cls.not_found(reason)
        if isinstance(error, SecretParseError):
            return cls.parse_error(reason)
        return cls.transient(reason)


class SecretBackendBlueprint(ABC):
    """Abstract interface for a remote secret store.

    Implementations map a namespaced :class:`SecretKey` to a plaintext value.
    Lookup failures are reported through :class:`ResolveResult` and never
    raised; only construction may fail, with
    :class:`~secretjack.base.exceptions.ConfigurationError`.
    """

    name: str = "backend"

    @abstractmethod
    def resolve(self, key: SecretKey) -> ResolveResult:
        """Look up the secret for *key*.

        Args:
            key: Parsed ``vendor/subkey`` key.

        Returns:
            FOUND with the exact stored plaintext, or a failure status.
        """
        pass
