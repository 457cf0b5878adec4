"""Syntax tree model consumed by the complexity scorer.

A function body is described as a tree of ``SyntaxNode`` values. Each node
carries one ``SyntaxKind`` out of a closed set; every syntactic construct
that is not a branch is ``OTHER``. Front-ends translate their own AST into
this form, the scorer never sees a language-specific node.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Tuple


class SyntaxKind(enum.Enum):
    CONDITIONAL = "if"
    SWITCH = "switch"
    SWITCH_CASE = "case"
    FOR_LOOP = "for"
    WHILE_LOOP = "while"
    DO_WHILE_LOOP = "do"
    TERNARY = "ternary"
    OTHER = "other"


DECISION_KINDS = frozenset(
    (
        SyntaxKind.CONDITIONAL,
        SyntaxKind.SWITCH,
        SyntaxKind.SWITCH_CASE,
        SyntaxKind.FOR_LOOP,
        SyntaxKind.WHILE_LOOP,
        SyntaxKind.DO_WHILE_LOOP,
        SyntaxKind.TERNARY,
    )
)


@dataclass(frozen=True)
class SyntaxNode:
    """One node of a function's syntax tree.

    Attributes:
        kind: Syntactic category.
        children: Child nodes in source order.
        label: Front-end specific node name, used for debugging output.
        line: Source line, if known.
        opens_scope: True for nested callables and classes.
    """

    kind: SyntaxKind = SyntaxKind.OTHER
    children: Tuple["SyntaxNode", ...] = field(default=())
    label: str = ""
    line: Optional[int] = None
    opens_scope: bool = False

    def __post_init__(self):
        children = tuple(self.children)
        if any(child is None for child in children):
            raise ValueError("SyntaxNode children must not contain None")
        object.__setattr__(self, "children", children)

    @property
    def is_decision(self) -> bool:
        return self.kind in DECISION_KINDS

    def walk(self) -> Iterator["SyntaxNode"]:
        """Yield this node and all descendants, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __repr__(self):
        return "SyntaxNode(%s, %s, %d children)" % (
            self.kind.name,
            self.label or "-",
            len(self.children),
        )


def node(kind: SyntaxKind = SyntaxKind.OTHER, *children: SyntaxNode, **kwargs) -> SyntaxNode:
    """Shorthand constructor, mostly for hand-built trees in tests."""
    return SyntaxNode(kind, tuple(children), **kwargs)


def block(children: Iterable[SyntaxNode], label: str = "body") -> SyntaxNode:
    return SyntaxNode(SyntaxKind.OTHER, tuple(children), label=label)
