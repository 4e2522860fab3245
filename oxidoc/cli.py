"""CLI for generating documentation caches and looking up functions."""

import argparse
import sys
from pathlib import Path

from oxidoc import __version__
from oxidoc.driver import Driver
from oxidoc.exceptions import OxidocError
from oxidoc.generator import Generator, discover_package_roots
from oxidoc.logging import get_logger, setup_logging
from oxidoc.settings import resolve_cache_root, resolve_cargo_home, settings
from oxidoc.store import DocStore

logger = get_logger(__name__)

GENERATE_ALL = "all"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="oxidoc", description="A command line interface to Rust documentation.")
    parser.add_argument("-V", "--version", action="store_true", help="Print version info")
    parser.add_argument(
        "-g",
        "--generate",
        metavar="CRATE_DIR",
        help=f"Generate documentation for the crate root directory, or '{GENERATE_ALL}' to regenerate every registry crate",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("query", nargs="*", help="Function name(s) to look up, optionally qualified (mod::name)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(level="DEBUG" if args.verbose else None)

    if args.version:
        print(f"oxidoc {__version__}")
        return 0

    try:
        return _run(args, parser)
    except OxidocError as e:
        _log_error_chain(e)
        return 1


def _run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.generate is not None:
        generator = Generator(DocStore(resolve_cache_root(settings)))
        if args.generate == GENERATE_ALL:
            generator.generate_all(discover_package_roots(resolve_cargo_home(settings)))
        else:
            generator.generate(Path(args.generate))
        return 0

    if not args.query:
        parser.print_usage(sys.stderr)
        logger.error("error: No search query was provided.")
        return 1

    driver = Driver(DocStore(resolve_cache_root(settings)), policy=settings.match_policy)
    driver.display(args.query)
    return 0


def _log_error_chain(error: BaseException) -> None:
    """Log the error and every exception it was raised from."""
    logger.error("error: %s", error)
    seen = {id(error)}
    cause = error.__cause__ or error.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        logger.error("caused by: %s", cause)
        cause = cause.__cause__ or cause.__context__


if __name__ == "__main__":
    sys.exit(main())
