"""Secretjack CLI — resolve secrets from the command line.

Usage examples::

    secretjack --provider aws --config '{"region_name":"us-east-1"}' get vendor1/api_key
    secretjack --provider file --config '{"path":".credentials"}' --verbose get magento/tfa/OTP
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``secretjack`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="secretjack",
        description="Resolve test framework secrets",
    )
    parser.add_argument(
        "--provider", "-p",
        required=True,
        choices=["aws", "gcp", "file"],
        help="Secret backend",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config string (e.g. \'{"region_name":"us-east-1"}\')',
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Emit debug diagnostics for each lookup",
    )
    subparsers = parser.add_subparsers(dest="operation", required=True)
    get_parser = subparsers.add_parser("get", help="Print the value of one or more keys")
    get_parser.add_argument("keys", nargs="+", help="Secret keys of the form vendor/key")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, builds a resolver for the chosen backend and prints
    each requested secret on its own line.  Exits with status 1 if any key
    could not be resolved or the backend is misconfigured.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        config: dict[str, Any] = json.loads(ns.config)
    except json.JSONDecodeError as e:
        print(f"Invalid --config JSON: {e}", file=sys.stderr)
        sys.exit(1)

    # Lazy-import to avoid loading all SDKs unconditionally
    from secretjack.base.exceptions import SecretjackError
    from secretjack.base.logger import sj_logger
    from secretjack.factory import create_resolver

    if ns.verbose:
        sj_logger.set_verbose(True)

    try:
        resolver = create_resolver([(ns.provider, config)])
    except (ValueError, SecretjackError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    missing = False
    for key in ns.keys:
        value = resolver.get_secret_value(key)
        if value is None:
            print(f"No value found for key '{key}'", file=sys.stderr)
            missing = True
        else:
            print(value)

    if missing:
        sys.exit(1)


if __name__ == "__main__":
    main()
