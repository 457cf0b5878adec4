"""
``cyclograph dot``: print the CFGs of one file as DOT text.
"""

import sys

from cyclograph.analysis.cfg.dump import CFGToDot
from cyclograph.application import FrontendError
from cyclograph.frontend import FunctionExtractor


def add_dot_parser(subparsers, add_logging_arguments):
    """Add dot subcommand parser."""
    parser = subparsers.add_parser("dot", help="Print control-flow graphs as DOT")
    parser.add_argument("input", help="Python source file")
    parser.add_argument(
        "-f", "--function",
        action="append",
        help="Only this function (bare or qualified name); may be repeated",
    )
    add_logging_arguments(parser)
    return parser


def selected(function, names):
    return not names or function.name in names or function.qualname in names


def run_dot(args, out=None):
    out = out if out is not None else sys.stdout

    try:
        unit = FunctionExtractor().extract_file(args.input)
    except FrontendError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    renderer = CFGToDot()
    found = 0
    for function in unit:
        if not selected(function, args.function):
            continue
        text = renderer.render(function.cfg)
        if text is None:
            continue
        found += 1
        out.write("// %s%s\n" % (function.qualname, function.signature))
        out.write(text)

    if args.function and not found:
        print("Error: no function named %s in %s" % (", ".join(args.function), args.input),
              file=sys.stderr)
        return 1
    return 0
