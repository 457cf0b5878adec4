"""Control Flow Graph (CFG) representation.

A ``ControlFlowGraph`` owns the basic blocks of one function. Blocks are
identified by an integer id that is unique within the graph; successor
links are ids into the same graph, so a block never owns its successors.

Front-ends build graphs with ``new_block`` and ``BasicBlock.add_successor``.
The graph also converts itself into a ``networkx.DiGraph`` for metrics that
are easier to state on a general graph (reachability, connected components).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import networkx as nx


@dataclass
class BasicBlock:
    """A straight-line run of statements.

    Attributes:
        id: Identifier, unique within the owning graph.
        statements: Source-like text of each statement, in execution order.
        successors: Ids of the blocks control may transfer to, in order.
    """

    id: int
    statements: List[str] = field(default_factory=list)
    successors: List[int] = field(default_factory=list)

    def append(self, statement: str) -> None:
        self.statements.append(statement)

    def add_successor(self, other: "BasicBlock") -> None:
        # A duplicate edge adds nothing to the graph's shape.
        if other.id not in self.successors:
            self.successors.append(other.id)

    @property
    def is_terminal(self) -> bool:
        return not self.successors


class ControlFlowGraph:
    """The basic blocks of a single function.

    Attributes:
        name: Name of the function the graph was built for.
        entry: Id of the entry block, or None for an empty graph.
        exit: Id of the exit block, or None.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._blocks: Dict[int, BasicBlock] = {}
        self._next_id = 0
        self.entry: Optional[int] = None
        self.exit: Optional[int] = None

    def new_block(self) -> BasicBlock:
        block = BasicBlock(self._next_id)
        self._next_id += 1
        self.add_block(block)
        return block

    def add_block(self, block: BasicBlock) -> BasicBlock:
        if block.id in self._blocks:
            raise ValueError("duplicate block id %d" % block.id)
        self._blocks[block.id] = block
        self._next_id = max(self._next_id, block.id + 1)
        return block

    def block(self, block_id: int) -> BasicBlock:
        return self._blocks[block_id]

    def blocks(self) -> List[BasicBlock]:
        """All blocks in ascending id order."""
        return [self._blocks[k] for k in sorted(self._blocks)]

    def __iter__(self) -> Iterator[BasicBlock]:
        return iter(self.blocks())

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block_id: int) -> bool:
        return block_id in self._blocks

    def edges(self):
        """``(src, dst)`` pairs, by ascending source id then successor order."""
        return [(b.id, s) for b in self.blocks() for s in b.successors]

    def predecessors(self, block_id: int) -> List[int]:
        return [b.id for b in self.blocks() if block_id in b.successors]

    def sanity_check(self) -> None:
        """Raise ``ValueError`` if a successor refers outside the graph."""
        for b in self._blocks.values():
            for s in b.successors:
                if s not in self._blocks:
                    raise ValueError("block %d has unknown successor %d" % (b.id, s))

    def to_networkx(self) -> nx.DiGraph:
        g = nx.DiGraph(name=self.name)
        for b in self.blocks():
            g.add_node(b.id, statements=tuple(b.statements))
        g.add_edges_from(self.edges())
        return g

    def reachable(self) -> List[int]:
        """Ids reachable from the entry block, ascending."""
        if self.entry is None:
            return []
        g = self.to_networkx()
        return sorted(nx.descendants(g, self.entry) | {self.entry})

    def __repr__(self):
        return "ControlFlowGraph(%r, %d blocks)" % (self.name, len(self))


def graph_complexity(graph: ControlFlowGraph) -> int:
    """McCabe's graph formula ``E - N + 2P``.

    P counts weakly connected components, so blocks made unreachable by a
    ``return`` or ``break`` each add a component. Returns 0 for an empty
    graph.
    """
    if not len(graph):
        return 0
    g = graph.to_networkx()
    components = nx.number_weakly_connected_components(g)
    return g.number_of_edges() - g.number_of_nodes() + 2 * components
