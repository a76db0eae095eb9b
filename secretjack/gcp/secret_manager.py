"""GCP Secret Manager implementation of the secret backend blueprint."""

from __future__ import annotations

import re

from google.cloud import secretmanager_v1
from google.api_core.exceptions import GoogleAPICallError, NotFound, PermissionDenied

from secretjack.base import ResolveResult, SecretBackendBlueprint, SecretKey
from secretjack.base.client_handle import ClientHandle
from secretjack.base.config import GCPBackendConfig
from secretjack.base.exceptions import (
    SecretLookupError,
    SecretNotFoundError,
    SecretParseError,
    TransientBackendError,
)
from secretjack.base.payload import parse_secret_payload
from secretjack.base.logger import SecretjackLogger, sj_logger

# Secret ids may only contain letters, digits, underscores and hyphens.
_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class SecretManager(SecretBackendBlueprint):
    """GCP Secret Manager backend.

    GCP secret ids cannot contain ``/``, so the namespaced id is joined with
    ``-``: ``{prefix}-{vendor}-{subkey}``. The latest version's payload is a
    JSON object holding the value under ``subkey``.

    Attributes:
        project_id: The GCP project ID where secrets are stored.
        prefix: First segment of every secret id.
    """

    name = "gcp"

    def __init__(self, config: GCPBackendConfig, logger: SecretjackLogger | None = None):
        """Initialize the GCP Secret Manager client.

        Args:
            config: GCP configuration (project, optional credentials).
            logger: Diagnostics sink; defaults to the module logger.

        Raises:
            ConfigurationError: If the client cannot be constructed.
        """
        self.config = config
        self.project_id = config.project_id
        self.prefix = config.namespace_prefix
        self.logger = logger or sj_logger
        self._client = ClientHandle(self._create_client, "GCP Secret Manager client")
        self._client.get()

    def _create_client(self):
        credentials = self.config.credentials
        if credentials is None and self.config.credentials_path:
            from google.oauth2 import service_account  # lazy import

            credentials = service_account.Credentials.from_service_account_file(
                self.config.credentials_path
            )
        return secretmanager_v1.SecretManagerServiceClient(credentials=credentials)

    @property
    def client(self):
        return self._client.get()

    def secret_id(self, key: SecretKey) -> str:
        """Build the fully qualified secret version name for *key*."""
        secret = _INVALID_ID_CHARS.sub("_", f"{self.prefix}-{key.vendor}-{key.subkey}")
        return f"projects/{self.project_id}/secrets/{secret}/versions/latest"

    def fetch_secret(self, key: SecretKey) -> str:
        """Read the plaintext secret for *key* from GCP Secret Manager.

        Raises:
            SecretNotFoundError: If the secret is missing or access is denied.
            SecretParseError: If the payload is not UTF-8 JSON with the entry.
            TransientBackendError: If the call fails for any other reason.
        """
        secret_name = self.secret_id(key)
        try:
            response = self.client.access_secret_version(name=secret_name)
            payload = response.payload.data.decode("UTF-8")
        except (NotFound, PermissionDenied) as e:
            raise SecretNotFoundError(
                f"GCP error: {type(e).__name__}. Unable to read value for key {key} from GCP Secret Manager",
                code=type(e).__name__,
            ) from e
        except GoogleAPICallError as e:
            raise TransientBackendError(
                f"GCP error: {type(e).__name__}. Unable to read value for key {key} from GCP Secret Manager",
                code=type(e).__name__,
            ) from e
        except UnicodeDecodeError as e:
            raise SecretParseError(
                f"Unable to parse value for key {key} from GCP Secret Manager: payload is not valid UTF-8"
            ) from e
        except Exception as e:
            raise TransientBackendError(
                f"Unable to read value for key {key} from GCP Secret Manager: {type(e).__name__}",
                code=type(e).__name__,
            ) from e
        return parse_secret_payload(payload, key.subkey)

    def resolve(self, key: SecretKey) -> ResolveResult:
        """Look up *key*, reporting every lookup failure as a result."""
        secret_name = self.secret_id(key)
        self.logger.debug(
            f"Retrieving value for key name {key} from GCP Secret Manager",
            backend=self.name, operation="resolve", key=secret_name,
        )
        try:
            return ResolveResult.success(self.fetch_secret(key))
        except SecretLookupError as e:
            self.logger.debug(str(e), backend=self.name, operation="resolve", key=secret_name)
            return ResolveResult.from_error(e)
