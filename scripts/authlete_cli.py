"""Command line interface for read-only Authlete API calls.

The handle is built from authlete.properties (or the file named by
AUTHLETE_CONFIGURATION_FILE), looked up in the working directory first.

Examples:
    python scripts/authlete_cli.py get-client 4326385670
    python scripts/authlete_cli.py get-client-list --developer authlete_5526908833
    python scripts/authlete_cli.py get-service-jwks --pretty --include-private-keys
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from authlete_client import get_default_api
from authlete_client.exceptions import AuthleteApiError, ConfigurationError


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def main() -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Command line interface for Authlete API")
    parser.add_argument("-v", "--verbose", action="count", default=0)

    sub = parser.add_subparsers(dest="cmd")

    gc = sub.add_parser("get-client")
    gc.add_argument("client_id")

    gcl = sub.add_parser("get-client-list")
    gcl.add_argument("--developer")
    gcl.add_argument("--start", type=int)
    gcl.add_argument("--end", type=int)

    gs = sub.add_parser("get-service")
    gs.add_argument("api_key")

    gsc = sub.add_parser("get-service-configuration")
    gsc.add_argument("--pretty", action="store_true")

    gsj = sub.add_parser("get-service-jwks")
    gsj.add_argument("--pretty", action="store_true")
    gsj.add_argument("--include-private-keys", action="store_true")

    gsl = sub.add_parser("get-service-list")
    gsl.add_argument("--start", type=int)
    gsl.add_argument("--end", type=int)

    args = parser.parse_args()

    if not args.cmd:
        parser.print_help()
        return

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    try:
        api = get_default_api()
        if args.cmd == "get-client":
            result = api.get_client(args.client_id)
        elif args.cmd == "get-client-list":
            result = api.get_client_list(args.developer, args.start, args.end)
        elif args.cmd == "get-service":
            result = api.get_service(args.api_key)
        elif args.cmd == "get-service-configuration":
            result = api.get_service_configuration(pretty=args.pretty)
        elif args.cmd == "get-service-jwks":
            result = api.get_service_jwks(pretty=args.pretty, include_private_keys=args.include_private_keys)
        else:
            result = api.get_service_list(args.start, args.end)
    except ConfigurationError as e:
        print(f"[authlete-cli] Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except AuthleteApiError as e:
        print(f"[authlete-cli] API error: {e}", file=sys.stderr)
        if e.response_body:
            print(e.response_body, file=sys.stderr)
        sys.exit(1)

    _print_json(result)


if __name__ == "__main__":
    main()
