"""AWS secret backend."""

from .secret_manager import SecretManager

__all__ = ["SecretManager"]
