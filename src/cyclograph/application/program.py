"""
Units of analysis.

A ``TranslationUnit`` is one parsed source file; it holds a
``FunctionUnit`` for every function defined in it, methods and nested
functions included. A FunctionUnit carries everything the passes need: the
syntax tree, the control-flow graph (or None when it could not be built)
and the two skip predicates.

**Lifecycle:**
1. The front-end creates the units for a file.
2. The pipeline runs the pass pipeline once per FunctionUnit.
3. Results go to the collector and the graph table; units are discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from cyclograph.analysis.cfg.graph import ControlFlowGraph
from cyclograph.analysis.syntax import SyntaxNode


@dataclass
class FunctionUnit:
    """
    One function body ready for analysis.

    Attributes:
        name: Bare function name.
        qualname: Dotted qualified name (``Class.method``,
            ``outer.<locals>.inner``).
        signature: Parameter list as written, e.g. ``(self, x, *args)``.
        path: Source file the function was read from.
        line: Line of the ``def``.
        syntax: Syntax tree of the body, None if there is no body.
        cfg: Control-flow graph, None if it could not be built.
        has_body: False for declarations only.
        in_header: True if declared in a header-like file.
    """

    name: str
    qualname: str
    signature: str = "()"
    path: Optional[str] = None
    line: Optional[int] = None
    syntax: Optional[SyntaxNode] = None
    cfg: Optional[ControlFlowGraph] = None
    has_body: bool = True
    in_header: bool = False

    def __repr__(self):
        return "FunctionUnit(%s%s)" % (self.qualname, self.signature)


@dataclass
class TranslationUnit:
    """The functions of one source file, in source order."""

    path: str
    functions: List[FunctionUnit] = field(default_factory=list)

    def add(self, function: FunctionUnit) -> FunctionUnit:
        self.functions.append(function)
        return function

    def __iter__(self):
        return iter(self.functions)

    def __len__(self):
        return len(self.functions)
