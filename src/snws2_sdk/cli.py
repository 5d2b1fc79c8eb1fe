"""
Command-line interface for SNWS2 Python SDK
Provides SNWS2 Authorization header and signing key computation
"""

import argparse
import logging
import sys
from typing import Optional

from . import __version__
from .config.settings import SigningSettings
from .exceptions import SNWS2SDKError
from .signing.authorization_builder import AuthorizationV2Builder
from .signing.signing_key import SigningKey
from .signing.types import HttpContentType, HttpHeaders
from .signing.utils import form_query_parse, parse_date, utc_now

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='snws2-sign',
        description='SNWS2 command-line interface for SolarNetwork request authorization'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'SNWS2 Python SDK {__version__}'
    )
    parser.add_argument('--token', help='Auth token identifier (default: $SNWS2_TOKEN)')
    parser.add_argument('--secret', help='Auth token secret (default: $SNWS2_TOKEN_SECRET)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    setup_sign_parser(subparsers)
    setup_key_parser(subparsers)

    return parser


def setup_sign_parser(subparsers):
    """Setup request signing subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Compute the Authorization header for a request')
    sign_parser.add_argument('--url', required=True, help='Request URL')
    sign_parser.add_argument('--method', default='GET', help='HTTP method (default: GET)')
    body_group = sign_parser.add_mutually_exclusive_group()
    body_group.add_argument('--data', help='Request body')
    body_group.add_argument('--data-file', help='File containing the request body')
    sign_parser.add_argument('--content-type', help='Request Content-Type')
    sign_parser.add_argument(
        '--header',
        action='append',
        default=[],
        metavar='NAME:VALUE',
        help='Additional header to sign; may be repeated'
    )
    sign_parser.add_argument('--date', help='Signing date, HTTP or ISO 8601 format (default: now)')
    sn_date_group = sign_parser.add_mutually_exclusive_group()
    sn_date_group.add_argument(
        '--sn-date',
        dest='sn_date',
        action='store_true',
        default=None,
        help='Sign the X-SN-Date header instead of Date'
    )
    sn_date_group.add_argument(
        '--no-sn-date',
        dest='sn_date',
        action='store_false',
        help='Sign the Date header instead of X-SN-Date'
    )
    sign_parser.add_argument('--force-host-port', action='store_true', help='Always include the port in Host')
    sign_parser.add_argument('--show-canonical', action='store_true', help='Print the canonical request data')


def setup_key_parser(subparsers):
    """Setup signing key subcommand."""
    key_parser = subparsers.add_parser('key', help='Derive a signing key from the token secret')
    key_parser.add_argument('--date', help='Signing date, HTTP or ISO 8601 format (default: now)')


def load_settings(args) -> SigningSettings:
    """Load settings from the environment, overridden by arguments."""
    settings = SigningSettings.from_env()
    if args.token:
        settings.token_id = args.token
    if args.secret:
        settings.token_secret = args.secret
    return settings


def parse_header(value: str):
    name, sep, header_value = value.partition(':')
    if not sep or not name.strip():
        raise ValueError(f"Invalid header, expected NAME:VALUE: {value}")
    return name.strip(), header_value.strip()


def read_body(args) -> Optional[bytes]:
    if args.data is not None:
        return args.data.encode('utf-8')
    if args.data_file:
        with open(args.data_file, 'rb') as f:
            return f.read()
    return None


def configure_builder(args, settings: SigningSettings) -> AuthorizationV2Builder:
    """Configure a builder from the sign command arguments."""
    if args.sn_date is not None:
        settings.use_sn_date = args.sn_date
    if args.force_host_port:
        settings.force_host_port = True

    builder = settings.create_builder()
    logger.debug(f"Signing {args.method.upper()} request to {args.url}")
    if args.date:
        builder.date(parse_date(args.date))
    builder.method(args.method.upper()).url(args.url)

    headers = [parse_header(h) for h in args.header]
    for name, value in headers:
        builder.header(name, value)
    if headers:
        builder.signed_http_headers((builder.signed_header_names or []) + [name for name, _ in headers])

    if args.content_type:
        builder.content_type(args.content_type)

    body = read_body(args)
    if body:
        if args.content_type and args.content_type.lower().startswith(HttpContentType.FORM_URLENCODED.value):
            builder.query_params(form_query_parse(body))
        else:
            builder.compute_content_digest(body)
    return builder


def handle_sign_command(args, settings: SigningSettings) -> int:
    """Handle request signing command."""
    secret = settings.require_secret()
    builder = configure_builder(args, settings)

    if args.show_canonical:
        print(builder.build_canonical_request_data(), file=sys.stderr)

    authorization = builder.build(secret)
    date_header = HttpHeaders.X_SN_DATE if builder.use_sn_date else HttpHeaders.DATE
    print(f"{HttpHeaders.AUTHORIZATION}: {authorization}")
    print(f"{date_header}: {builder.request_date_header_value}")
    digest = builder.http_headers.first_value(HttpHeaders.DIGEST)
    if digest:
        print(f"{HttpHeaders.DIGEST}: {digest}")
    return 0


def handle_key_command(args, settings: SigningSettings) -> int:
    """Handle signing key derivation command."""
    date = parse_date(args.date) if args.date else utc_now()
    signing_key = SigningKey.derive(settings.require_secret(), date)
    print(f"Signing Key: {signing_key.hex()}")
    print(f"Expires: {signing_key.expiration_date.isoformat()}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else settings.log_level,
            format='%(levelname)s %(name)s: %(message)s'
        )

        if args.command == 'sign':
            return handle_sign_command(args, settings)
        elif args.command == 'key':
            return handle_key_command(args, settings)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (SNWS2SDKError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
