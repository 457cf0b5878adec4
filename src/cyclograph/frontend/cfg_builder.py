"""CFG construction from Python function definitions.

``CFGBuilder`` walks the statements of a ``def`` and fills a
``ControlFlowGraph``. Block 0 is the entry block and block 1 the exit
block; every other block gets the next id as it is created, so the same
source always yields the same graph.

Each block holds the one-line source text of its statements. Compound
statements contribute a header line to the block that branches:

- ``if``: ``if <test>`` ends the current block, which branches to the
  ``then`` block first and to the ``else`` block (or the join) second.
- ``while``/``for``: a header block ``while <test>`` / ``for <t> in <it>``
  branches to the body and to the ``else`` clause or the block after the
  loop. ``continue`` jumps to the header, ``break`` after the loop.
- ``try``: the block entering the body branches to the body; the body
  block branches to every handler (``except <type> as <name>``) and to the
  ``finally`` block, since any of its statements may raise. ``raise``
  jumps to the handlers of the innermost ``try`` or to the exit.
- ``match``: ``match <subject>`` branches to one ``case <pattern>`` block
  per case and, unless a case is irrefutable, to the join.
- ``with``: ``with <items>`` is a plain statement; its body continues in
  the same block.
- nested ``def``/``class``: a single ``def name(args)`` / ``class Name``
  statement.

``return`` jumps to the exit. Statements following a jump are unreachable;
they start a new block without predecessors, which is kept in the graph.
"""

import ast as python_ast
import logging
from typing import Optional

from cyclograph.analysis.cfg.graph import ControlFlowGraph
from cyclograph.util.typedispatch import TypeDispatcher, defaultdispatch, dispatch

from .ast_converter import has_body, strip_docstring

LOG = logging.getLogger(__name__)


class NoNormalFlow(Exception):
    """Control cannot fall through the statement just visited."""
    pass


def unparse(node) -> str:
    return python_ast.unparse(node)


def handlerText(handler, star=False) -> str:
    text = "except*" if star else "except"
    if handler.type is not None:
        text += " " + unparse(handler.type)
    if handler.name:
        text += " as " + handler.name
    return text


def caseText(case) -> str:
    text = "case " + unparse(case.pattern)
    if case.guard is not None:
        text += " if " + unparse(case.guard)
    return text


def isIrrefutable(pattern) -> bool:
    """``case _``, ``case name`` and alternatives containing one of them."""
    if isinstance(pattern, python_ast.MatchAs):
        return pattern.pattern is None or isIrrefutable(pattern.pattern)
    if isinstance(pattern, python_ast.MatchOr):
        return any(isIrrefutable(p) for p in pattern.patterns)
    return False


class CFGBuilder(TypeDispatcher):
    """Builds the ControlFlowGraph of one function.

    Attributes:
        graph: Graph being built.
        current: Block receiving statements, None after a jump.
        handlers: Jump target stacks for ``break``, ``continue`` and
            ``raise``. A ``raise`` entry is a list of handler blocks.
    """

    def __init__(self):
        self.graph = None
        self.current = None
        self.handlers = None

    def pushHandler(self, kind, target):
        self.handlers[kind].append(target)

    def popHandler(self, kind):
        self.handlers[kind].pop()

    def handler(self, kind):
        stack = self.handlers[kind]
        return stack[-1] if stack else None

    def makeNewBlock(self):
        return self.graph.new_block()

    def emit(self, text):
        self.current.append(text)

    def attachCurrent(self, target):
        self.current.add_successor(target)
        self.current = None

    def exitBlock(self):
        return self.graph.block(self.graph.exit)

    def visitSuite(self, body):
        """Visit ``body`` in order; raises NoNormalFlow if its end is unreachable."""
        for stmt in body:
            if self.current is None:
                self.current = self.makeNewBlock()
                LOG.debug("%s: unreachable code at line %s", self.graph.name, stmt.lineno)
            try:
                self(stmt)
            except NoNormalFlow:
                self.current = None

        if self.current is None:
            raise NoNormalFlow

    def branch(self, block, body):
        """Visit ``body`` starting in ``block``; returns the block control leaves from, or None."""
        self.current = block
        try:
            self.visitSuite(body)
        except NoNormalFlow:
            return None
        return self.current

    def merge(self, exits, branch=None):
        """
        Continue after a construct that control leaves from ``exits``.

        A single exit is continued in place, unless it is the branching
        block itself; statements after the branch must not share its block.
        """
        exits = [e for e in exits if e is not None]
        if not exits:
            raise NoNormalFlow
        if len(exits) == 1 and exits[0] is not branch:
            self.current = exits[0]
            return
        join = self.makeNewBlock()
        for e in exits:
            e.add_successor(join)
        self.current = join

    @dispatch(python_ast.Return)
    def visitReturn(self, node):
        self.emit(unparse(node))
        self.attachCurrent(self.exitBlock())
        raise NoNormalFlow

    @dispatch(python_ast.Raise)
    def visitRaise(self, node):
        self.emit(unparse(node))
        targets = self.handler("raise") or [self.exitBlock()]
        for target in targets:
            self.current.add_successor(target)
        self.current = None
        raise NoNormalFlow

    @dispatch(python_ast.Break)
    def visitBreak(self, node):
        target = self.handler("break")
        self.emit("break")
        if target is None:
            # Rejected by the compiler, but ast.parse accepts it.
            return
        self.attachCurrent(target)
        raise NoNormalFlow

    @dispatch(python_ast.Continue)
    def visitContinue(self, node):
        target = self.handler("continue")
        self.emit("continue")
        if target is None:
            return
        self.attachCurrent(target)
        raise NoNormalFlow

    @dispatch(python_ast.If)
    def visitIf(self, node):
        condition = self.current
        self.emit("if " + unparse(node.test))

        t = self.makeNewBlock()
        condition.add_successor(t)
        exits = [self.branch(t, node.body)]

        if node.orelse:
            f = self.makeNewBlock()
            condition.add_successor(f)
            exits.append(self.branch(f, node.orelse))
        else:
            exits.append(condition)

        self.merge(exits, condition)

    def visitLoop(self, node, header_text):
        header = self.makeNewBlock()
        self.current.add_successor(header)
        header.append(header_text)

        body = self.makeNewBlock()
        header.add_successor(body)
        else_ = self.makeNewBlock() if node.orelse else None
        after = self.makeNewBlock()

        self.pushHandler("continue", header)
        self.pushHandler("break", after)
        try:
            end = self.branch(body, node.body)
        finally:
            self.popHandler("continue")
            self.popHandler("break")

        if end is not None:
            end.add_successor(header)

        if else_ is not None:
            header.add_successor(else_)
            end = self.branch(else_, node.orelse)
            if end is not None:
                end.add_successor(after)
        else:
            header.add_successor(after)

        self.current = after

    @dispatch(python_ast.While)
    def visitWhile(self, node):
        self.visitLoop(node, "while " + unparse(node.test))

    @dispatch(python_ast.For)
    def visitFor(self, node):
        self.visitLoop(node, "for %s in %s" % (unparse(node.target), unparse(node.iter)))

    @dispatch(python_ast.AsyncFor)
    def visitAsyncFor(self, node):
        self.visitLoop(node, "async for %s in %s" % (unparse(node.target), unparse(node.iter)))

    @dispatch(python_ast.Try, python_ast.TryStar)
    def visitTry(self, node):
        star = isinstance(node, python_ast.TryStar)

        body = self.makeNewBlock()
        self.current.add_successor(body)

        handlerBlocks = []
        for h in node.handlers:
            b = self.makeNewBlock()
            b.append(handlerText(h, star))
            body.add_successor(b)
            handlerBlocks.append(b)

        final = None
        if node.finalbody:
            final = self.makeNewBlock()
            final.append("finally")
            body.add_successor(final)

        targets = handlerBlocks or [final]
        self.pushHandler("raise", targets)
        try:
            end = self.branch(body, node.body)
        finally:
            self.popHandler("raise")

        if end is not None and node.orelse:
            end = self.branch(end, node.orelse)

        exits = [end]
        for b, h in zip(handlerBlocks, node.handlers):
            exits.append(self.branch(b, h.body))

        if final is None:
            self.merge(exits, body)
            return

        for e in exits:
            if e is not None:
                e.add_successor(final)
        self.current = final
        self.visitSuite(node.finalbody)

    @dispatch(python_ast.With, python_ast.AsyncWith)
    def visitWith(self, node):
        keyword = "async with" if isinstance(node, python_ast.AsyncWith) else "with"
        self.emit("%s %s" % (keyword, ", ".join(unparse(item) for item in node.items)))
        self.visitSuite(node.body)

    @dispatch(python_ast.Match)
    def visitMatch(self, node):
        subject = self.current
        self.emit("match " + unparse(node.subject))

        exits = []
        exhaustive = False
        for case in node.cases:
            b = self.makeNewBlock()
            b.append(caseText(case))
            subject.add_successor(b)
            exits.append(self.branch(b, case.body))
            if case.guard is None and isIrrefutable(case.pattern):
                exhaustive = True

        if not exhaustive:
            exits.append(subject)
        self.merge(exits, subject)

    @dispatch(python_ast.FunctionDef, python_ast.AsyncFunctionDef)
    def visitFunctionDef(self, node):
        keyword = "async def" if isinstance(node, python_ast.AsyncFunctionDef) else "def"
        self.emit("%s %s(%s)" % (keyword, node.name, unparse(node.args)))

    @dispatch(python_ast.ClassDef)
    def visitClassDef(self, node):
        self.emit("class " + node.name)

    @defaultdispatch
    def visitStatement(self, node):
        self.emit(unparse(node))

    def build(self, function) -> Optional[ControlFlowGraph]:
        """The CFG of ``function`` (a ``def`` node), or None if it has no body."""
        if not has_body(function):
            return None

        self.graph = ControlFlowGraph(function.name)
        entry = self.makeNewBlock()
        exit = self.makeNewBlock()
        self.graph.entry = entry.id
        self.graph.exit = exit.id
        self.handlers = {"break": [], "continue": [], "raise": []}

        self.current = entry
        try:
            self.visitSuite(strip_docstring(function.body))
        except NoNormalFlow:
            pass
        else:
            self.attachCurrent(exit)

        self.graph.sanity_check()
        LOG.debug("built %r", self.graph)
        return self.graph
