"""CFG dumping as Graphviz DOT text.

The renderer emits one node declaration per basic block and then one edge
declaration per (block, successor) pair. Both passes walk the blocks in
ascending id order and each block's successors in their stored order, so
the text depends only on the graph and is stable across runs:

    digraph CFG {
      Block0 [label="Block 0\\n"];
      Block1 [label="Block 1\\nx = 1\\n"];
      Block0 -> Block1;
    }
"""

from __future__ import annotations

import logging
from typing import Optional

from cyclograph.util.io import dot

from .graph import BasicBlock, ControlFlowGraph

LOG = logging.getLogger(__name__)

GRAPH_NAME = "CFG"


def blockName(block_id: int) -> str:
    return "Block%d" % block_id


def blockLabel(block: BasicBlock) -> str:
    """``Block <id>`` followed by each statement, one per line.

    Every line is terminated, including the last, so the raw label ends
    with a newline and renders as a trailing ``\\n`` in DOT.
    """
    lines = ["Block %d" % block.id]
    lines.extend(block.statements)
    return "".join(line + "\n" for line in lines)


class CFGToDot(object):
    """Renders ControlFlowGraphs into DOT text."""

    def __init__(self, graph_name: str = GRAPH_NAME):
        self.graph_name = graph_name

    def build(self, graph: ControlFlowGraph) -> dot.Graph:
        g = dot.Digraph(self.graph_name)
        blocks = graph.blocks()

        for block in blocks:
            g.node(blockName(block.id), label=blockLabel(block))

        for block in blocks:
            for succ in block.successors:
                g.edge(blockName(block.id), blockName(succ))

        return g

    def render(self, graph: Optional[ControlFlowGraph]) -> Optional[str]:
        """DOT text for ``graph``, or None when there is no graph to render."""
        if graph is None:
            return None
        graph.sanity_check()
        text = self.build(graph).dumps()
        LOG.debug("rendered %r: %d bytes", graph, len(text))
        return text


def render(graph: Optional[ControlFlowGraph]) -> Optional[str]:
    return CFGToDot().render(graph)
