"""Backend and resolver factories.

Provides :func:`backend_factory`, which validates a provider config and
builds the matching backend, and :func:`create_resolver`, which wires one or
more backends to a :class:`~secretjack.resolver.SecretResolver`.
"""

from __future__ import annotations

from typing import Sequence

from secretjack.base import SecretBackendBlueprint, existing_backends
from secretjack.base.config import validate_config
from secretjack.base.context import SecretContext
from secretjack.base.logger import SecretjackLogger
from secretjack.aws.secret_manager import SecretManager as AWSSecretManager
from secretjack.gcp.secret_manager import SecretManager as GCPSecretManager
from secretjack.local.file_storage import FileStorage
from secretjack.chain import ChainedBackend
from secretjack.resolver import SecretResolver


# Backend registry: provider -> backend class
_BACKEND_REGISTRY: dict[str, type[SecretBackendBlueprint]] = {
    "aws": AWSSecretManager,
    "gcp": GCPSecretManager,
    "file": FileStorage,
}


def backend_factory(
    provider: existing_backends,
    config: dict,
    logger: SecretjackLogger | None = None,
) -> SecretBackendBlueprint:
    """
    Create a secret backend for the given provider.
    Args:
        provider: The backend provider (e.g. 'aws', 'gcp', 'file').
        config: Configuration dictionary for that provider.
        logger: Optional diagnostics sink passed to the backend.
    Returns:
        An initialized backend whose client already exists.
    Raises:
        ValueError: If the provider is not supported.
        pydantic.ValidationError: If the config is invalid.
        ConfigurationError: If the backend client cannot be constructed.
    """
    if provider not in _BACKEND_REGISTRY:
        raise ValueError(f"Unsupported secret backend: {provider}")

    backend_class = _BACKEND_REGISTRY[provider]
    configObj = validate_config(provider, config)
    return backend_class(configObj, logger=logger)  # type: ignore[call-arg]


def create_resolver(
    backends: Sequence[tuple[existing_backends, dict]],
    context: SecretContext | None = None,
    logger: SecretjackLogger | None = None,
) -> SecretResolver:
    """Build a resolver over one or more configured backends.

    Several backends are consulted in the given order.

    Args:
        backends: ``(provider, config)`` pairs.
        context: Shared cache and crypto context; built from the environment
            when omitted.
        logger: Optional diagnostics sink for backends and resolver.

    Returns:
        A ready :class:`SecretResolver`.
    """
    if not backends:
        raise ValueError("At least one secret backend must be configured")
    built = [backend_factory(provider, config, logger=logger) for provider, config in backends]
    backend = built[0] if len(built) == 1 else ChainedBackend(built)
    return SecretResolver(backend, context or SecretContext.from_config(), logger=logger)
