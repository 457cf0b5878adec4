"""
AST Converter for turning Python functions into cyclograph syntax trees.

Python ``ast`` nodes are mapped onto the closed set of ``SyntaxKind``
values:

==========================================  ==============
Python node                                 SyntaxKind
==========================================  ==============
``If``                                      CONDITIONAL
``Match``                                   SWITCH
``match_case``                              SWITCH_CASE
``For``, ``AsyncFor``, ``comprehension``    FOR_LOOP
``While``                                   WHILE_LOOP
``IfExp``                                   TERNARY
anything else                               OTHER
==========================================  ==============

Nested ``def``, ``lambda`` and ``class`` become OTHER nodes with
``opens_scope`` set. Boolean operators and ``except`` handlers are not
branches here. Python has no ``do``/``while``, so DO_WHILE_LOOP never
appears in trees built from Python source.
"""

import ast as python_ast
from typing import Optional

from cyclograph.analysis.syntax import SyntaxKind, SyntaxNode
from cyclograph.util.typedispatch import TypeDispatcher, defaultdispatch, dispatch

FUNCTION_NODES = (python_ast.FunctionDef, python_ast.AsyncFunctionDef)
SCOPE_NODES = FUNCTION_NODES + (python_ast.Lambda, python_ast.ClassDef)
LOOP_NODES = (python_ast.For, python_ast.AsyncFor, python_ast.comprehension)

# Load/Store/Del markers carry no structure.
IGNORED_NODES = (python_ast.expr_context,)


def is_docstring(stmt) -> bool:
    return (
        isinstance(stmt, python_ast.Expr)
        and isinstance(stmt.value, python_ast.Constant)
        and isinstance(stmt.value.value, str)
    )


def strip_docstring(body):
    if body and is_docstring(body[0]):
        return body[1:]
    return body


def is_overload(function) -> bool:
    """True if ``function`` is decorated with ``overload`` or ``typing.overload``."""
    for decorator in function.decorator_list:
        if isinstance(decorator, python_ast.Name) and decorator.id == "overload":
            return True
        if isinstance(decorator, python_ast.Attribute) and decorator.attr == "overload":
            return True
    return False


def has_body(function) -> bool:
    """
    False for declarations: ``@overload`` stubs and functions whose body is
    nothing but ``...`` (after an optional docstring). A function holding
    only a docstring does have a body; calling it returns None.
    """
    if is_overload(function):
        return False
    body = strip_docstring(function.body)
    if not body:
        return True
    return not all(
        isinstance(stmt, python_ast.Expr)
        and isinstance(stmt.value, python_ast.Constant)
        and stmt.value.value is Ellipsis
        for stmt in body
    )


class SyntaxTreeBuilder(TypeDispatcher):
    """Converts Python AST nodes into SyntaxNode trees.

    The visitors only classify a node as ``(kind, opens_scope)``. The tree
    is assembled bottom-up on an explicit stack, so long operator or
    attribute chains do not exhaust the interpreter stack.
    """

    @dispatch(python_ast.If)
    def visitIf(self, node):
        return SyntaxKind.CONDITIONAL, False

    @dispatch(python_ast.Match)
    def visitMatch(self, node):
        return SyntaxKind.SWITCH, False

    @dispatch(python_ast.match_case)
    def visitMatchCase(self, node):
        return SyntaxKind.SWITCH_CASE, False

    @dispatch(LOOP_NODES)
    def visitFor(self, node):
        return SyntaxKind.FOR_LOOP, False

    @dispatch(python_ast.While)
    def visitWhile(self, node):
        return SyntaxKind.WHILE_LOOP, False

    @dispatch(python_ast.IfExp)
    def visitIfExp(self, node):
        return SyntaxKind.TERNARY, False

    @dispatch(SCOPE_NODES)
    def visitScope(self, node):
        return SyntaxKind.OTHER, True

    @defaultdispatch
    def visitOther(self, node):
        return SyntaxKind.OTHER, False

    def _children(self, nodes):
        return [child for child in nodes if not isinstance(child, IGNORED_NODES)]

    def convert(self, nodes):
        """SyntaxNodes of ``nodes`` and everything below them, in order."""
        nodes = self._children(nodes)
        built = {}
        stack = [(node, None) for node in reversed(nodes)]
        while stack:
            node, children = stack.pop()
            if children is None:
                children = self._children(python_ast.iter_child_nodes(node))
                stack.append((node, children))
                stack.extend((child, None) for child in reversed(children))
                continue

            kind, opens_scope = self(node)
            built[id(node)] = SyntaxNode(
                kind,
                tuple(built.pop(id(child)) for child in children),
                label=type(node).__name__,
                line=getattr(node, "lineno", None),
                opens_scope=opens_scope,
            )
        return tuple(built.pop(id(node)) for node in nodes)

    def build(self, function) -> Optional[SyntaxNode]:
        """
        Syntax tree of a ``def``'s body.

        Decorators, defaults and annotations are evaluated where the
        function is defined, so they are left out. Returns None for a
        function without a body.
        """
        if not has_body(function):
            return None
        return SyntaxNode(
            SyntaxKind.OTHER,
            self.convert(function.body),
            label=type(function).__name__,
            line=function.lineno,
        )
