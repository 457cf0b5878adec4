"""
``cyclograph analyze``: score every function and write the results.

Unreadable source files are reported and skipped; the command still writes
the results of everything else and exits with status 1. With ``--strict``
the first unreadable file aborts the run before anything is written.
"""

import logging
import sys

from cyclograph.analysis.collector import KeyPolicy
from cyclograph.application import (
    AnalysisConfig,
    ConfigError,
    FrontendError,
    OutputError,
    OutputWriter,
    Pipeline,
)
from cyclograph.application.config import DEFAULT_GRAPH_FORMAT, DEFAULT_REPORT_NAME
from cyclograph.util.application.console import Console
from cyclograph.util.io.formatting import plural

LOG = logging.getLogger(__name__)


def add_analyze_parser(subparsers, add_logging_arguments):
    """Add analyze subcommand parser."""
    parser = subparsers.add_parser(
        "analyze",
        help="Compute cyclomatic complexity and write CFGs",
    )
    parser.add_argument("paths", nargs="+", help="Files or directories to analyze")
    parser.add_argument(
        "-o", "--output-dir",
        default=".",
        help="Directory for the report and the graph files (default: current directory)",
    )
    parser.add_argument(
        "--report-name",
        default=DEFAULT_REPORT_NAME,
        help="File name of the report (default: %(default)s)",
    )
    parser.add_argument(
        "--graph-format",
        default=DEFAULT_GRAPH_FORMAT,
        help="Extension of the graph files (default: %(default)s)",
    )
    parser.add_argument(
        "--no-graphs",
        action="store_true",
        help="Do not write CFG files",
    )
    parser.add_argument(
        "--key-policy",
        choices=[p.value for p in KeyPolicy],
        default=KeyPolicy.NAME.value,
        help="Key functions by bare name or by qualified name and signature",
    )
    parser.add_argument(
        "--no-nested",
        action="store_true",
        help="Do not count branches inside nested functions, lambdas and classes",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        help="Number of threads used to parse source files",
    )
    parser.add_argument("--json-summary", metavar="PATH", help="Also write a JSON summary")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first file that cannot be parsed",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="No status lines")
    add_logging_arguments(parser)
    return parser


def config_from_args(args):
    return AnalysisConfig(
        output_dir=args.output_dir,
        report_name=args.report_name,
        graph_format=args.graph_format,
        emit_graphs=not args.no_graphs,
        key_policy=args.key_policy,
        descend_into_nested=not args.no_nested,
        jobs=args.jobs,
        json_summary=args.json_summary,
    )


def run_analyze(args, out=None):
    """Run the analysis described by ``args``; returns the exit code."""
    out = out if out is not None else sys.stdout

    try:
        config = config_from_args(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    console = Console(out, verbose=args.verbose, quiet=args.quiet)
    pipeline = Pipeline(config=config, strict=args.strict)
    context = pipeline.create_context(console)

    try:
        pipeline.run(args.paths, context)
        written = OutputWriter(config).write_all(context)
    except FrontendError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OutputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    stats = context.stats
    console.output(
        "Analyzed %s in %s, wrote %s"
        % (
            plural(stats["analyzed"], "function"),
            plural(stats["files"] - stats["failed_files"], "file"),
            plural(len(written), "file"),
        ),
        0,
    )
    for error in context.failures:
        print(f"Error: {error}", file=sys.stderr)

    return 1 if context.failures else 0
