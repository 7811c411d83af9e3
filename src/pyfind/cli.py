"""CLI entry point for pyfind — I/O boundary only."""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys

from pyfind import FindError
from pyfind.filter import FilterConfig, TypeFilter
from pyfind.scanner import walk

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    The parser only takes the start path. Everything after it is handed
    over verbatim, because find-style option values may themselves start
    with ``-`` (``-name '-*'``).

    Returns:
        argparse.ArgumentParser: Configured parser for the ``pyfind`` command.
    """
    parser = argparse.ArgumentParser(
        prog="pyfind",
        usage="%(prog)s start_path [-name PATTERN] [-iname PATTERN] [-type f|d]",
        description="recursive filesystem search with glob name filters",
        epilog=(
            "-name PATTERN matches the final path component against a glob "
            "(case-sensitive), -iname PATTERN does the same ignoring case, "
            "-type f|d only matches regular files or directories. "
            "Repeating an option keeps the last value."
        ),
        allow_abbrev=False,
    )
    parser.add_argument(
        "start_path",
        help="Path to start searching from",
    )
    parser.add_argument(
        "filters",
        nargs=argparse.REMAINDER,
        help="Filter options: -name, -iname, -type",
    )
    return parser


def _resolve_type_filter(value: str, current: TypeFilter | None) -> TypeFilter | None:
    """Translate a ``-type`` value, reporting invalid ones.

    An invalid value is reported on stderr and leaves *current* in place,
    so a lone invalid ``-type`` means no type constraint.

    Args:
        value: Raw CLI value.
        current: Type filter set by an earlier ``-type``, if any.

    Returns:
        TypeFilter | None: Parsed filter, or *current*.
    """
    try:
        return TypeFilter.parse(value)
    except ValueError as exc:
        sys.stderr.write(f"pyfind: {exc}\n")
        return current


def _scan_filters(tokens: list[str]) -> FilterConfig:
    """Build the filter config from the tokens after the start path.

    Tokens are scanned left to right. An option takes the next token as
    its value whatever it looks like; an option with no value left, and
    any unknown token, is ignored.

    Args:
        tokens: Raw arguments following the start path.

    Returns:
        FilterConfig: Filters named by the tokens.
    """
    name: str | None = None
    iname: str | None = None
    type_filter: TypeFilter | None = None

    i = 0
    while i < len(tokens):
        option = tokens[i]
        if option in ("-name", "-iname", "-type") and i + 1 < len(tokens):
            value = tokens[i + 1]
            if option == "-name":
                name = value
            elif option == "-iname":
                iname = value
            else:
                type_filter = _resolve_type_filter(value, type_filter)
            i += 2
            continue

        logger.debug("Ignoring argument: %s", option)
        i += 1

    return FilterConfig.from_patterns(name=name, iname=iname, type_filter=type_filter)


def parse_options(argv: list[str] | None = None) -> tuple[str, FilterConfig]:
    """Parse command-line arguments into a start path and filter config.

    Args:
        argv: Argument list without program name. If ``None``, uses
            process arguments.

    Returns:
        tuple[str, FilterConfig]: Start path as given and the filters.
    """
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)
    if extras:
        logger.debug("Ignoring unrecognized arguments: %s", extras)

    return args.start_path, _scan_filters(args.filters)


def _print_matches(start_path: str, config: FilterConfig) -> None:
    """Write every matching path to stdout as it is discovered.

    Raises:
        BrokenPipeError: If stdout was closed by the reader.
        FindError: If the traversal hits any other I/O error.
    """
    try:
        for entry in walk(start_path, config):
            sys.stdout.write(f"{entry.path}\n")
    except BrokenPipeError:
        raise
    except OSError as exc:
        raise FindError(str(exc)) from exc


def run_find(argv: list[str] | None = None) -> int:
    """Run pyfind with provided CLI args.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments.

    Returns:
        int: Process exit status, ``0`` on success and ``1`` when the
        traversal was aborted by an I/O error. A closed output pipe ends
        the run quietly with ``0``.
    """
    start_path, config = parse_options(argv)

    try:
        _print_matches(start_path, config)
        sys.stdout.flush()
    except BrokenPipeError:
        # The reader went away; closing stdout keeps the final flush quiet.
        with contextlib.suppress(OSError):
            sys.stdout.close()
        return 0
    except FindError as exc:
        sys.stdout.flush()
        sys.stderr.write(f"pyfind: {exc}\n")
        return 1
    return 0


def main() -> None:
    """Run the CLI entry point with process arguments.

    Exits with code 2 on usage errors and 1 on traversal errors.
    """
    sys.exit(run_find())
