"""Secretjack — cached secret resolution for automated test runs.

Entry point for the library. Build a resolver with :func:`create_resolver`
and look secrets up by ``vendor/key``::

    from secretjack import create_resolver

    resolver = create_resolver([("aws", {"region_name": "us-east-1"})])
    token = resolver.get_secret_value("vendor1/api_token")
"""

from .base import (
    SecretKey,
    ResolveResult,
    ResolveStatus,
    SecretBackendBlueprint,
)
from .base.context import SecretContext
from .base.exceptions import ConfigurationError, MalformedKeyError, SecretjackError
from .resolver import SecretResolver
from .factory import backend_factory, create_resolver

__all__ = [
    "SecretKey",
    "ResolveResult",
    "ResolveStatus",
    "SecretBackendBlueprint",
    "SecretContext",
    "ConfigurationError",
    "MalformedKeyError",
    "SecretjackError",
    "SecretResolver",
    "backend_factory",
    "create_resolver",
]
