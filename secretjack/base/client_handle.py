"""
Lazy, idempotent SDK client handle.

Each backend owns one handle. The first ``get`` builds the client through
the factory; later calls return the same object. A factory that raises or
returns ``None`` makes the whole backend unusable, reported as
:class:`ConfigurationError`.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

from secretjack.base.exceptions import ConfigurationError

T = TypeVar("T")


class ClientHandle(Generic[T]):
    """Thread-safe holder for a single lazily-created client."""

    def __init__(self, factory: Callable[[], T | None], description: str) -> None:
        self._factory = factory
        self._description = description
        self._client: T | None = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._client is not None

    def get(self) -> T:
        """Return the client, creating it on first use.

        Raises:
            ConfigurationError: If the client cannot be constructed.
        """
        with self._lock:
            if self._client is not None:
                return self._client
            try:
                client = self._factory()
            except ConfigurationError:
                raise
            except Exception as e:
                raise ConfigurationError(
                    f"Unable to create {self._description}: {e}"
                ) from e
            if client is None:
                raise ConfigurationError(f"Unable to create {self._description}")
            self._client = client
            return client
