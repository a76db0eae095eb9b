"""Decoding of JSON object secret payloads shared by the cloud backends."""

from __future__ import annotations

import json

from secretjack.base.exceptions import SecretParseError


def parse_secret_payload(raw_secret: object, subkey: str) -> str:
    """Extract *subkey* from a JSON object payload.

    Args:
        raw_secret: The secret payload as returned by the store.
        subkey: Entry to read from the decoded object.

    Returns:
        The value stored under *subkey*; numbers and booleans are returned
        in their JSON text form.

    Raises:
        SecretParseError: If the payload is not a string holding a JSON object
            with a scalar entry named *subkey*.
    """
    if not isinstance(raw_secret, str):
        raise SecretParseError("Secret payload is missing or not a string")
    try:
        secret = json.loads(raw_secret)
    except json.JSONDecodeError:
        raise SecretParseError("Secret payload is not valid JSON")
    if not isinstance(secret, dict):
        raise SecretParseError("Secret payload is not a JSON object")
    value = secret.get(subkey)
    if isinstance(value, str):
        return value
    # bool first: it is an int subclass, and JSON spells it true/false
    if isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return str(value)
    raise SecretParseError(f"Secret payload has no scalar entry '{subkey}'")
