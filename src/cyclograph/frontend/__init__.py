"""Python front-end: source files to syntax trees and control-flow graphs."""

from .function_extractor import FunctionExtractor
from .ast_converter import SyntaxTreeBuilder
from .cfg_builder import CFGBuilder

__all__ = ["FunctionExtractor", "SyntaxTreeBuilder", "CFGBuilder"]
