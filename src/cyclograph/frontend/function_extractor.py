"""
Function Extractor for turning Python source files into translation units.

Every ``def`` in a module becomes a ``FunctionUnit``: top-level functions,
methods, and functions nested in other functions or in compound
statements. Qualified names follow ``__qualname__``: ``Class.method`` for
methods, ``outer.<locals>.inner`` for nested functions.
"""

import ast as python_ast
import logging
import tokenize
from typing import List, Optional, Tuple

from cyclograph.application.config import AnalysisConfig
from cyclograph.application.errors import FrontendError
from cyclograph.application.program import FunctionUnit, TranslationUnit

from .ast_converter import FUNCTION_NODES, SyntaxTreeBuilder, has_body
from .cfg_builder import CFGBuilder

LOG = logging.getLogger(__name__)

LOCALS = "<locals>"


def signature(function) -> str:
    """Parameter list as written, e.g. ``(self, x: int=1, *args)``."""
    return "(%s)" % python_ast.unparse(function.args)


class FunctionExtractor:
    """Extracts the functions of Python modules."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config if config is not None else AnalysisConfig()
        self.syntax_builder = SyntaxTreeBuilder()

    def collect(self, tree) -> List[Tuple[python_ast.AST, str]]:
        """``(def node, qualified name)`` pairs of every ``def`` in ``tree``, in source order."""
        found = []
        stack = [(tree, ())]
        while stack:
            node, scope = stack.pop()
            if isinstance(node, FUNCTION_NODES):
                qualified = scope + (node.name,)
                found.append((node, ".".join(qualified)))
                scope = qualified + (LOCALS,)
            elif isinstance(node, python_ast.ClassDef):
                scope = scope + (node.name,)
            stack.extend((child, scope) for child in reversed(list(python_ast.iter_child_nodes(node))))
        return found

    def build_cfg(self, function):
        try:
            return CFGBuilder().build(function)
        except RecursionError:
            LOG.debug("CFG of %s at line %d is too deeply nested", function.name, function.lineno)
            return None

    def convert_function(self, function, qualname: str, path: Optional[str] = None) -> FunctionUnit:
        """Build the FunctionUnit of one ``def`` node."""
        body = has_body(function)
        return FunctionUnit(
            name=function.name,
            qualname=qualname,
            signature=signature(function),
            path=path,
            line=function.lineno,
            syntax=self.syntax_builder.build(function) if body else None,
            cfg=self.build_cfg(function) if body else None,
            has_body=body,
            in_header=self.config.is_header(path),
        )

    def extract_source(self, source: str, path: str = "<string>") -> TranslationUnit:
        """Parse ``source`` and return its functions.

        Raises:
            FrontendError: If the source is not valid Python, or nests too
                deeply to convert.
        """
        try:
            tree = python_ast.parse(source, filename=path)
        except SyntaxError as e:
            raise FrontendError("%s:%s: %s" % (path, e.lineno, e.msg), path) from e
        except ValueError as e:
            # Null bytes in the source.
            raise FrontendError("%s: %s" % (path, e), path) from e
        except RecursionError as e:
            raise FrontendError("%s: too deeply nested to parse" % path, path) from e

        unit = TranslationUnit(path)
        for function, qualname in self.collect(tree):
            try:
                unit.add(self.convert_function(function, qualname, path))
            except RecursionError as e:
                raise FrontendError(
                    "%s:%d: %s is too deeply nested" % (path, function.lineno, qualname), path
                ) from e

        LOG.debug("%s: %d functions", path, len(unit))
        return unit

    def extract_file(self, path: str) -> TranslationUnit:
        """Read ``path`` (honouring its coding declaration) and extract it."""
        try:
            with tokenize.open(path) as f:
                source = f.read()
        except (OSError, SyntaxError, UnicodeDecodeError) as e:
            raise FrontendError("cannot read %s: %s" % (path, e), path) from e
        return self.extract_source(source, path)
