"""Secret backend blueprint and core utilities.

Every secret backend implements :class:`SecretBackendBlueprint`. Import the
names below to type-hint your own code or to write a custom backend.
"""

from .keys import SecretKey, parse_secret_key
from .backend import ResolveResult, ResolveStatus, SecretBackendBlueprint
from .supported_services import existing_backends


__all__ = [
    "SecretKey",
    "parse_secret_key",
    "ResolveResult",
    "ResolveStatus",
    "SecretBackendBlueprint",
    "existing_backends",
]
