"""
Encrypted secret cache.

Holds resolved secrets for the lifetime of the process, keyed by subkey.
Entries are write-once and never evicted.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class _KeyLock:
    """Lock for one subkey plus the number of callers holding or awaiting it."""

    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class SecretCache:
    """Thread-safe, unbounded map of subkey -> encrypted value."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._key_locks: dict[str, _KeyLock] = {}
        self._lock = threading.Lock()

    def get(self, subkey: str) -> str | None:
        """Return the encrypted value for *subkey*, or ``None`` if absent."""
        with self._lock:
            return self._entries.get(subkey)

    def put(self, subkey: str, encrypted_value: str) -> None:
        """Store *encrypted_value* unless *subkey* already has an entry."""
        with self._lock:
            self._entries.setdefault(subkey, encrypted_value)

    @contextmanager
    def key_lock(self, subkey: str) -> Iterator[None]:
        """Hold an exclusive lock for one subkey.

        Wrap a get / fetch / put sequence in this so concurrent lookups of the
        same subkey do not both reach the backend. The lock is discarded once
        no caller holds or waits on it.
        """
        with self._lock:
            entry = self._key_locks.get(subkey)
            if entry is None:
                entry = self._key_locks[subkey] = _KeyLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._key_locks[subkey]

    def __contains__(self, subkey: object) -> bool:
        with self._lock:
            return subkey in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
