"""Control Flow Graph (CFG) model and DOT rendering."""

from .graph import BasicBlock, ControlFlowGraph, graph_complexity
from .dump import CFGToDot, render

__all__ = ["BasicBlock", "ControlFlowGraph", "graph_complexity", "CFGToDot", "render"]
