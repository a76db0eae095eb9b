"""
Pydantic configuration models for secret backends and the crypto context.

Validates configs at initialization time instead of silently passing bad
values to SDK clients.
"""

from __future__ import annotations

import base64
import binascii
import os
from pathlib import Path
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, model_validator

from secretjack.base.crypto import IV_SIZE, KEY_SIZE, CryptoContext

DEFAULT_NAMESPACE_PREFIX = "mftf"
DEFAULT_CREDENTIALS_FILE = ".credentials"


class AWSBackendConfig(BaseModel):
    """Configuration for the AWS Secrets Manager backend.

    Credentials are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY,
       AWS_DEFAULT_REGION, AWS_PROFILE).
    3. If neither is set, fields are left as None so boto3 can fall back to its
       own credential chain (instance metadata, ~/.aws/credentials, etc.).
    """

    model_config = ConfigDict(extra="forbid")

    aws_access_key_id: str | None = Field(default=None, description="AWS access key ID")
    aws_secret_access_key: str | None = Field(default=None, description="AWS secret access key")
    region_name: str | None = Field(default=None, description="AWS region (e.g. 'us-east-1')")
    profile_name: str | None = Field(default=None, description="Named profile from the AWS config files")
    namespace_prefix: str = Field(
        default=DEFAULT_NAMESPACE_PREFIX, description="First segment of every secret id"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing credentials."""
        env_map = {
            "aws_access_key_id": "AWS_ACCESS_KEY_ID",
            "aws_secret_access_key": "AWS_SECRET_ACCESS_KEY",
            "region_name": "AWS_DEFAULT_REGION",
            "profile_name": "AWS_PROFILE",
        }
        for field, env_var in env_map.items():
            if not values.get(field):
                values[field] = os.environ.get(env_var)
        return values


class GCPBackendConfig(BaseModel):
    """Configuration for the GCP Secret Manager backend.

    Credentials are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (GOOGLE_CLOUD_PROJECT, GOOGLE_APPLICATION_CREDENTIALS).
    3. If neither is set, fields are left as None so the GCP SDK can fall back
       to Application Default Credentials (ADC).
    """

    model_config = ConfigDict(extra="forbid")

    project_id: str | None = Field(default=None, description="GCP project ID")
    credentials: Any | None = Field(default=None, description="GCP credentials object")
    credentials_path: str | None = Field(
        default=None, description="Path to service account JSON key file"
    )
    namespace_prefix: str = Field(
        default=DEFAULT_NAMESPACE_PREFIX, description="First segment of every secret id"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing config."""
        if not values.get("project_id"):
            values["project_id"] = os.environ.get("GOOGLE_CLOUD_PROJECT") or os.environ.get(
                "GCLOUD_PROJECT"
            )
        if not values.get("credentials_path"):
            values["credentials_path"] = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
        return values

    @model_validator(mode="after")
    def validate_project(self) -> GCPBackendConfig:
        """Ensure project_id is set."""
        if self.project_id is None:
            raise ValueError(
                "GCP project_id is required. Set it explicitly or via "
                "GOOGLE_CLOUD_PROJECT / GCLOUD_PROJECT environment variable."
            )
        return self


class FileBackendConfig(BaseModel):
    """Configuration for the local credentials file backend."""

    model_config = ConfigDict(extra="forbid")

    path: Path = Field(
        default=Path(DEFAULT_CREDENTIALS_FILE),
        description="File with one 'vendor/subkey=value' entry per line",
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        if not values.get("path") and os.environ.get("SECRETJACK_CREDENTIALS_FILE"):
            values["path"] = os.environ["SECRETJACK_CREDENTIALS_FILE"]
        return values


class CryptoConfig(BaseModel):
    """Key material for the process-wide :class:`CryptoContext`.

    ``key`` and ``iv`` are base64 strings. Leave both unset to have a random
    pair generated for the process.
    """

    model_config = ConfigDict(extra="forbid")

    key: str | None = Field(default=None, description=f"Base64 encoded {KEY_SIZE}-byte key")
    iv: str | None = Field(default=None, description=f"Base64 encoded {IV_SIZE}-byte IV")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        env_map = {"key": "SECRETJACK_CRYPTO_KEY", "iv": "SECRETJACK_CRYPTO_IV"}
        for field, env_var in env_map.items():
            if not values.get(field):
                values[field] = os.environ.get(env_var)
        return values

    @model_validator(mode="after")
    def validate_key_material(self) -> CryptoConfig:
        """Require key and IV together, with the right decoded lengths."""
        if (self.key is None) != (self.iv is None):
            raise ValueError("Crypto key and iv must be provided together")
        if self.key is not None and self.iv is not None:
            if len(_b64(self.key, "key")) != KEY_SIZE:
                raise ValueError(f"Crypto key must decode to {KEY_SIZE} bytes")
            if len(_b64(self.iv, "iv")) != IV_SIZE:
                raise ValueError(f"Crypto iv must decode to {IV_SIZE} bytes")
        return self

    def to_context(self) -> CryptoContext:
        """Build the crypto context, generating one if no key was configured."""
        if self.key is None or self.iv is None:
            return CryptoContext.generate()
        return CryptoContext(key=_b64(self.key, "key"), iv=_b64(self.iv, "iv"))


def _b64(value: str, name: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Crypto {name} is not valid base64: {e}") from e


# Map provider names to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[BaseModel]] = {
    "aws": AWSBackendConfig,
    "gcp": GCPBackendConfig,
    "file": FileBackendConfig,
}


def validate_config(provider: str, config: dict) -> BaseModel:
    """Validate and return a typed config model for the given backend provider.

    Args:
        provider: The backend provider name (e.g. 'aws', 'gcp', 'file').
        config: Raw configuration dictionary.

    Returns:
        A validated Pydantic config model.

    Raises:
        ValueError: If the provider is unknown.
        pydantic.ValidationError: If the config is invalid.
    """
    model = CONFIG_REGISTRY.get(provider)
    if model is None:
        raise ValueError(f"No config model registered for provider: {provider}")
    return model(**config)


__all__ = [
    "AWSBackendConfig",
    "GCPBackendConfig",
    "FileBackendConfig",
    "CryptoConfig",
    "CONFIG_REGISTRY",
    "validate_config",
]
