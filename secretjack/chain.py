"""Ordered fallback over several secret backends."""

from __future__ import annotations

from typing import Sequence

from secretjack.base import ResolveResult, SecretBackendBlueprint, SecretKey


class ChainedBackend(SecretBackendBlueprint):
    """Ask each backend in turn and return the first value found.

    When no backend has the key, the last backend's failure is returned so
    its status (not found vs. transient) is what the caller sees.
    """

    name = "chain"

    def __init__(self, backends: Sequence[SecretBackendBlueprint]):
        if not backends:
            raise ValueError("ChainedBackend needs at least one backend")
        self.backends = list(backends)

    def resolve(self, key: SecretKey) -> ResolveResult:
        result = ResolveResult.not_found()
        for backend in self.backends:
            result = backend.resolve(key)
            if result.found:
                return result
        return result
