"""Main CLI dispatcher for cyclograph."""

import argparse
import logging
import sys

from cyclograph import __version__
from cyclograph.application import PassManager, register_standard_passes

from .analyze import add_analyze_parser, run_analyze
from .dot import add_dot_parser, run_dot


def configure_logging(args):
    level = logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def add_logging_arguments(parser):
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-d", "--debug", action="store_true", help="Debug output")


def list_passes(out=None):
    """Print the registered passes with their descriptions and dependencies."""
    out = out if out is not None else sys.stdout
    manager = register_standard_passes(PassManager())
    out.write("Available passes:\n")
    for name in manager.list_passes():
        info = manager.get_pass_info(name)
        line = "  %-24s %-10s %s" % (name, info.kind.value, info.description)
        if info.dependencies:
            line += " (requires: %s)" % ", ".join(sorted(info.dependencies))
        out.write(line.rstrip() + "\n")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description="cyclograph - cyclomatic complexity and control-flow graphs",
        prog="cyclograph",
    )
    parser.add_argument("--version", action="version", version="cyclograph %s" % __version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    add_analyze_parser(subparsers, add_logging_arguments)
    add_dot_parser(subparsers, add_logging_arguments)
    subparsers.add_parser("passes", help="List the available passes")

    return parser


def main(argv=None):
    """Main entry point for the cyclograph CLI.

    Returns:
        int: Exit code (0 for success, 1 if any file could not be analyzed
        or an output could not be written, 2 for invalid options).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "passes":
        return list_passes()

    configure_logging(args)

    if args.command == "analyze":
        return run_analyze(args)
    elif args.command == "dot":
        return run_dot(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
