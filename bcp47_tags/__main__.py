"""Check BCP 47 language tags against the IANA language subtag registry."""

import argparse
import importlib.resources
import logging
import sys
import traceback
from importlib.metadata import PackageNotFoundError, version
from logging.config import dictConfig
from typing import Iterator, List, Optional, Sequence

import toml

from .download_registry import download_registry
from .exceptions import Bcp47Error
from .query import search
from .registry import Registry, get_registry, load_registry
from .tag import Tag

try:
    __version__ = version("bcp47_tags")
except PackageNotFoundError:  # Running from a source checkout
    __version__ = "unknown"


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """
    Configure logging from the ``logging.toml`` file shipped with the package.
    """
    with (
        importlib.resources.as_file(
            importlib.resources.files("bcp47_tags").joinpath("logging.toml")
        ) as config_path,
        open(config_path, "rb") as f,
    ):
        log_config = toml.loads(f.read().decode("utf-8"))
    dictConfig(log_config)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    :return: parsed arguments
    :rtype: argparse.Namespace
    """
    parser = argparse.ArgumentParser(
        description=__doc__.strip() if __doc__ else None,
        prog="bcp47-tags",
    )
    parser.add_argument(
        "tags",
        nargs="*",
        help='language tags to check, or "-" to read one tag per line from stdin',
    )
    parser.add_argument(
        "-f",
        "--format",
        action="store_true",
        help="print the canonical form of each valid tag",
    )
    parser.add_argument(
        "-s",
        "--search",
        metavar="QUERY",
        help="search subtag descriptions (case-insensitive if QUERY is lowercase)",
    )
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="include grandfathered and redundant tags in search results",
    )
    parser.add_argument(
        "--date",
        action="store_true",
        help="print the date of the registry",
    )
    parser.add_argument(
        "--update",
        action="store_true",
        help="download the current registry from IANA",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="with --update, download even if the cached registry is up to date",
    )
    parser.add_argument(
        "--registry",
        metavar="PATH",
        help="registry file to use instead of the default",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="show version",
    )
    parser.add_argument("--verbose", action="store_true", help="enable verbose output")

    args = parser.parse_args(argv)

    if not (args.tags or args.search or args.date or args.update):
        parser.error("nothing to do: give tags, --search, --date or --update")

    if args.force and not args.update:
        parser.error("--force requires --update")

    if args.update and args.registry:
        parser.error("--update cannot be used with --registry")

    return args


def iter_tags(tags: List[str]) -> Iterator[str]:
    """
    Yield the tags given on the command line, reading stdin for "-".
    """
    for tag in tags:
        if tag == "-":
            for line in sys.stdin:
                line = line.strip()
                if line:
                    yield line
        else:
            yield tag


def print_exception(exc: Exception, debug: bool) -> None:
    """
    Print an exception message to stderr, optionally including a stack trace.

    :param exc: The exception to print.
    :type exc: Exception
    :param debug: Whether to include a stack trace.
    :type debug: bool
    """
    if debug:
        traceback.print_exc()
    else:
        print(exc, file=sys.stderr)


def check_tags(tags: List[str], registry: Registry, print_format: bool) -> int:
    """
    Print the errors of each tag.

    :return: 2 if any tag is invalid, 0 otherwise.
    :rtype: int
    """
    status = 0
    for raw in iter_tags(tags):
        tag = Tag(raw, registry)
        errors = tag.errors()
        for error in errors:
            print(f"{raw}: {error.code.name}: {error.message}")
        if errors:
            status = 2
        elif print_format:
            print(tag.format())
    return status


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main function to parse arguments and run the requested registry operations.

    :return: Exit status code
    :rtype: int
    """
    args = parse_args(argv)
    configure_logging()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        if args.update:
            path = download_registry(force=args.force)
            print(f"Registry saved to {path}", file=sys.stderr)

        registry = load_registry(args.registry) if args.registry else get_registry()

        if args.date:
            print(registry.file_date)

        if args.search:
            for result in search(args.search, include_whole_tags=args.all, registry=registry):
                descriptions = ", ".join(result.descriptions())
                print(f"{result.format()}\t{result.type()}\t{descriptions}")

        return check_tags(args.tags, registry, args.format)
    except (Bcp47Error, OSError) as exception:
        print_exception(exception, args.verbose)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
