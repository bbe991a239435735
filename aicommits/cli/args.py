"""CLI Argument Parsing"""

import argparse
import argcomplete

from aicommits import COMMIT_TYPE_NAMES, __version__


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='aicommits',
        description='Generate commit messages for a diff with an OpenAI-compatible API',
        epilog='Example: git diff --staged | aicommits -g 3'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Input
    parser.add_argument('--diff-file', type=str, metavar='PATH', help='Read the diff from a file instead of stdin')

    # Generation options
    parser.add_argument('-g', '--generate', type=int, metavar='N', help='Number of messages to generate (1-5)')
    parser.add_argument('-t', '--type', type=str, choices=COMMIT_TYPE_NAMES, help="Commit message format ('' or conventional)")
    parser.add_argument('-l', '--locale', type=str, metavar='LOCALE', help='Message language, e.g. en, de, pt-br')
    parser.add_argument('--max-length', type=int, metavar='N', help='Maximum message length in characters')

    # API options
    parser.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model name')
    parser.add_argument('--timeout', type=int, metavar='MS', help='Per-attempt timeout in milliseconds')
    parser.add_argument('--proxy', type=str, metavar='URL', help='HTTP(S) proxy URL')
    parser.add_argument('--retries', type=_non_negative_int, metavar='N', help='Retries on transient network failures (default: 2)')
    parser.add_argument('--insecure-tls', action='store_true', help='Skip TLS certificate verification')

    # Output options
    parser.add_argument('--verbose', action='store_true', help='Show retry attempts and request details')

    argcomplete.autocomplete(parser)
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
