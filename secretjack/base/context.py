"""Process-wide resolution state: the encrypted cache and its crypto context."""

from __future__ import annotations

from dataclasses import dataclass, field

from secretjack.base.cache import SecretCache
from secretjack.base.config import CryptoConfig
from secretjack.base.crypto import CryptoContext


@dataclass(frozen=True)
class SecretContext:
    """One cache and one crypto context, created at startup and injected.

    Resolvers sharing a context share cached secrets. The crypto context is
    fixed for the lifetime of the object so cached entries stay decryptable.
    """

    crypto: CryptoContext
    cache: SecretCache = field(default_factory=SecretCache)

    @classmethod
    def from_config(cls, config: CryptoConfig | None = None) -> SecretContext:
        """Build a context from crypto configuration (environment by default)."""
        return cls(crypto=(config or CryptoConfig()).to_context())
