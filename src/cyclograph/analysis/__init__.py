"""
Per-function analyses.

- ``syntax``: the SyntaxNode/SyntaxKind tree model
- ``complexity``: cyclomatic complexity scoring over syntax trees
- ``cfg``: the control-flow graph model and its DOT renderer
- ``collector``: aggregation of per-function scores

Everything in this package is a pure computation over in-memory data; file
output lives in ``cyclograph.application.output``.
"""

from .syntax import SyntaxKind, SyntaxNode
from .complexity import ComplexityScorer
from .collector import ComplexityRecord, KeyPolicy, ResultCollector

__all__ = [
    "SyntaxKind",
    "SyntaxNode",
    "ComplexityScorer",
    "ComplexityRecord",
    "KeyPolicy",
    "ResultCollector",
]
