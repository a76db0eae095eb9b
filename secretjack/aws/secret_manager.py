"""AWS Secrets Manager implementation of the secret backend blueprint."""

from __future__ import annotations

import boto3
from botocore.exceptions import ClientError

from secretjack.base import ResolveResult, SecretBackendBlueprint, SecretKey
from secretjack.base.client_handle import ClientHandle
from secretjack.base.config import AWSBackendConfig
from secretjack.base.exceptions import (
    SecretLookupError,
    SecretNotFoundError,
    TransientBackendError,
)
from secretjack.base.payload import parse_secret_payload
from secretjack.base.logger import SecretjackLogger, sj_logger

# Error codes meaning "this secret is not available to us", as opposed to a
# failure worth retrying later.
NOT_FOUND_CODES = frozenset(
    {
        "ResourceNotFoundException",
        "AccessDeniedException",
        "AccessDenied",
        "UnrecognizedClientException",
        "InvalidRequestException",
        "InvalidParameterException",
        "DecryptionFailure",
    }
)


class SecretManager(SecretBackendBlueprint):
    """AWS Secrets Manager backend.

    Each vendor keeps one secret named ``{prefix}/{vendor}/{subkey}`` whose
    ``SecretString`` is a JSON object; the entry named ``subkey`` holds the
    value.

    Attributes:
        config: Validated AWS configuration.
        prefix: First segment of every secret id.
    """

    name = "aws"

    def __init__(self, config: AWSBackendConfig, logger: SecretjackLogger | None = None):
        """Initialize the AWS Secrets Manager client.

        Args:
            config: AWS configuration (region, profile, optional explicit keys).
            logger: Diagnostics sink; defaults to the module logger.

        Raises:
            ConfigurationError: If the boto3 client cannot be constructed.
        """
        self.config = config
        self.prefix = config.namespace_prefix
        self.logger = logger or sj_logger
        self._client = ClientHandle(self._create_client, "AWS Secrets Manager client")
        self._client.get()

    def _create_client(self):
        session = boto3.Session(
            aws_access_key_id=self.config.aws_access_key_id,
            aws_secret_access_key=self.config.aws_secret_access_key,
            region_name=self.config.region_name,
            profile_name=self.config.profile_name,
        )
        return session.client("secretsmanager")

    @property
    def client(self):
        return self._client.get()

    def secret_id(self, key: SecretKey) -> str:
        """Build the Secrets Manager id for *key*."""
        return f"{self.prefix}/{key.vendor}/{key.subkey}"

    def fetch_secret(self, key: SecretKey) -> str:
        """Read the plaintext secret for *key* from AWS Secrets Manager.

        Returns:
            The value stored under ``key.subkey``.

        Raises:
            SecretNotFoundError: If the secret is missing or access is denied.
            SecretParseError: If the payload has an unexpected structure.
            TransientBackendError: If the call fails for any other reason.
        """
        secret_id = self.secret_id(key)
        try:
            response = self.client.get_secret_value(SecretId=secret_id)
            raw_secret = response.get("SecretString")
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            message = f"AWS error code: {code}. Unable to read value for key {key} from AWS Secrets Manager"
            if code in NOT_FOUND_CODES:
                raise SecretNotFoundError(message, code=code) from e
            raise TransientBackendError(message, code=code) from e
        except Exception as e:
            raise TransientBackendError(
                f"Unable to read value for key {key} from AWS Secrets Manager: {type(e).__name__}",
                code=type(e).__name__,
            ) from e
        return parse_secret_payload(raw_secret, key.subkey)

    def resolve(self, key: SecretKey) -> ResolveResult:
        """Look up *key*, reporting every lookup failure as a result.

        Returns:
            FOUND with the value, NOT_FOUND for missing/denied secrets,
            PARSE_ERROR for an unexpected payload, TRANSIENT_ERROR otherwise.
        """
        secret_id = self.secret_id(key)
        self.logger.debug(
            f"Retrieving value for key name {key} from AWS Secrets Manager",
            backend=self.name, operation="resolve", key=secret_id,
        )
        try:
            return ResolveResult.success(self.fetch_secret(key))
        except SecretLookupError as e:
            self.logger.debug(str(e), backend=self.name, operation="resolve", key=secret_id)
            return ResolveResult.from_error(e)
