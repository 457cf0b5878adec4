"""
McCabe cyclomatic complexity over a function's syntax tree.

The score is the number of decision points in the tree plus one, where a
decision point is any node of kind CONDITIONAL, SWITCH, SWITCH_CASE,
FOR_LOOP, WHILE_LOOP, DO_WHILE_LOOP or TERNARY. Every node is counted once
no matter how deeply it is nested.

Note: some tools score a subtree as ``1 + sum(child scores)``. That grows
with nesting depth and does not match McCabe's definition, so it is not
offered here; a ``for`` containing an ``if`` scores 3, not more.

Nested callables (lambdas, local functions, local classes) are part of the
enclosing function's tree. By default their decision points are counted;
``ComplexityScorer(descend_into_nested=False)`` stops at them.
"""

from __future__ import annotations

import collections
import logging
from typing import Counter, Iterator, Optional

from .syntax import DECISION_KINDS, SyntaxKind, SyntaxNode

LOG = logging.getLogger(__name__)

BASE_COMPLEXITY = 1


class ComplexityScorer:
    """Stateless cyclomatic complexity calculator."""

    def __init__(self, descend_into_nested: bool = True):
        self.descend_into_nested = descend_into_nested

    def _nodes(self, root: SyntaxNode) -> Iterator[SyntaxNode]:
        # Iterative pre-order walk; the root itself is always visited even
        # when it opens a scope (it is the function being scored).
        stack = [root]
        while stack:
            current = stack.pop()
            yield current
            for child in reversed(current.children):
                if child.opens_scope and not self.descend_into_nested:
                    continue
                stack.append(child)

    def count_decisions(self, root: Optional[SyntaxNode]) -> int:
        """Number of decision points in the subtree; 0 for ``None``."""
        if root is None:
            return 0
        return sum(1 for n in self._nodes(root) if n.kind in DECISION_KINDS)

    def score(self, root: Optional[SyntaxNode]) -> int:
        """Cyclomatic complexity of the subtree rooted at ``root``."""
        complexity = self.count_decisions(root) + BASE_COMPLEXITY
        LOG.debug("complexity of %r: %d", root, complexity)
        return complexity

    def breakdown(self, root: Optional[SyntaxNode]) -> Counter[SyntaxKind]:
        """Decision points per kind, for reporting."""
        counts: Counter[SyntaxKind] = collections.Counter()
        if root is None:
            return counts
        for n in self._nodes(root):
            if n.kind in DECISION_KINDS:
                counts[n.kind] += 1
        return counts


_default = ComplexityScorer()


def score(root: Optional[SyntaxNode]) -> int:
    """Cyclomatic complexity using the default scorer."""
    return _default.score(root)
