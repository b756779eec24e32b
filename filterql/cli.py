"""
FilterQL command-line interface.

Usage:
    filterql validate 'Age > 30 && (Name @= "jo" || Name @= "ann")'
    filterql validate - --format json < query.txt
    filterql tokenize '(Status ^^ ["a","b"])'
    filterql encode 'Name == "John Smith" &&' --prefix
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional

from . import __version__
from .builder import QueryBuilder
from .lexer import tokenize
from .validator import validate_query

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "FILTERQL_LOG_LEVEL"


def _read_query(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    return value


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _cmd_validate(parsed: argparse.Namespace, text: str) -> int:
    result = validate_query(text)

    if parsed.format == "json":
        print(json.dumps(result.to_dict(), indent=2))
    elif result.valid:
        print("VALID")
    else:
        print("INVALID")
        for error in result.errors:
            print(f"- {error}")

    return 0 if result.valid else 1


def _cmd_tokenize(parsed: argparse.Namespace, text: str) -> int:
    tokens = tokenize(text.strip())
    if parsed.format == "json":
        print(json.dumps(tokens, indent=2))
    else:
        for position, token in enumerate(tokens, start=1):
            print(f"{position:>4}  {token}")
    return 0


def _cmd_encode(parsed: argparse.Namespace, text: str) -> int:
    builder = QueryBuilder(encode_uri=True, add_filter_statement=parsed.prefix)
    print(builder.append(text.strip()).build())
    return 0


_COMMANDS = {
    "validate": _cmd_validate,
    "tokenize": _cmd_tokenize,
    "encode": _cmd_encode,
}


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code: 0 on success (or a valid query), 1 if the query is
        invalid, 2 on error
    """
    parser = argparse.ArgumentParser(
        prog="filterql",
        description="Validate, tokenize and encode filter queries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Pass - as QUERY to read it from stdin.

Exit codes:
    0 - Success / query is valid
    1 - Query is invalid
    2 - Error
        """,
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help=f"Enable debug logging (default level comes from ${LOG_LEVEL_ENV})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Check query structure")
    validate_parser.add_argument("query", help="Query text, or - for stdin")
    validate_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    tokenize_parser = subparsers.add_parser("tokenize", help="Print lexer tokens")
    tokenize_parser.add_argument("query", help="Query text, or - for stdin")
    tokenize_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    encode_parser = subparsers.add_parser(
        "encode", help="Finalize and percent-encode a query for use in a URL"
    )
    encode_parser.add_argument("query", help="Query text, or - for stdin")
    encode_parser.add_argument(
        "--prefix",
        action="store_true",
        help='Prepend the "Filters= " marker',
    )

    parsed = parser.parse_args(args)
    _configure_logging(parsed.verbose)

    try:
        text = _read_query(parsed.query)
    except OSError as e:
        print(f"Error reading query: {e}", file=sys.stderr)
        return 2

    logger.debug("Running %s on %r", parsed.command, text)
    return _COMMANDS[parsed.command](parsed, text)


if __name__ == "__main__":
    sys.exit(main())
