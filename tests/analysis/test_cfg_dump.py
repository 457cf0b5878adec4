"""
Tests for the CFG model and its DOT rendering.
"""

import unittest

import pytest

from cyclograph.analysis.cfg import dump
from cyclograph.analysis.cfg.graph import BasicBlock, ControlFlowGraph, graph_complexity


def two_blocks():
    g = ControlFlowGraph("f")
    a = g.new_block()
    b = g.new_block()
    b.append("x = 1")
    a.add_successor(b)
    g.entry = a.id
    return g


def diamond():
    g = ControlFlowGraph("diamond")
    entry, exit = g.new_block(), g.new_block()
    g.entry, g.exit = entry.id, exit.id
    entry.append("if x > 0")
    t, f = g.new_block(), g.new_block()
    t.append("y = 1")
    f.append("y = -1")
    entry.add_successor(t)
    entry.add_successor(f)
    t.add_successor(exit)
    f.add_successor(exit)
    return g


class TestRender(unittest.TestCase):
    def testTwoBlocks(self):
        text = dump.render(two_blocks())
        self.assertEqual(
            text,
            "digraph CFG {\n"
            '  Block0 [label="Block 0\\n"];\n'
            '  Block1 [label="Block 1\\nx = 1\\n"];\n'
            "  Block0 -> Block1;\n"
            "}\n",
        )

    def testCounts(self):
        g = diamond()
        text = dump.render(g)
        lines = text.splitlines()
        nodes = [l for l in lines if "[label=" in l]
        edges = [l for l in lines if "->" in l]
        self.assertEqual(len(nodes), len(g))
        self.assertEqual(len(edges), len(g.edges()))
        self.assertEqual(len(edges), 4)

    def testNodesBeforeEdges(self):
        lines = dump.render(diamond()).splitlines()[1:-1]
        kinds = ["edge" if "->" in l else "node" for l in lines]
        self.assertEqual(kinds, sorted(kinds, key=lambda k: k == "edge"))

    def testSuccessorOrderIsKept(self):
        edges = [l.strip() for l in dump.render(diamond()).splitlines() if "->" in l]
        self.assertEqual(
            edges,
            ["Block0 -> Block2;", "Block0 -> Block3;", "Block2 -> Block1;", "Block3 -> Block1;"],
        )

    def testDeterministic(self):
        self.assertEqual(dump.render(diamond()), dump.render(diamond()))

    def testBlocksSortedById(self):
        g = ControlFlowGraph()
        g.add_block(BasicBlock(7))
        g.add_block(BasicBlock(3))
        lines = dump.render(g).splitlines()
        self.assertTrue(lines[1].startswith("  Block3 "))
        self.assertTrue(lines[2].startswith("  Block7 "))

    def testNoGraph(self):
        self.assertIsNone(dump.render(None))

    def testEscaping(self):
        g = ControlFlowGraph()
        b = g.new_block()
        b.append('print("a\\tb")')
        text = dump.render(g)
        self.assertIn('label="Block 0\\nprint(\\"a\\\\tb\\")\\n"', text)

    def testEmptyGraph(self):
        self.assertEqual(dump.render(ControlFlowGraph()), "digraph CFG {\n}\n")

    def testCustomGraphName(self):
        text = dump.CFGToDot("my_func").render(two_blocks())
        self.assertTrue(text.startswith("digraph my_func {\n"))

    def testDanglingSuccessor(self):
        g = ControlFlowGraph()
        g.new_block().successors.append(5)
        with self.assertRaises(ValueError):
            dump.render(g)


def test_block_label_terminates_every_line():
    b = BasicBlock(4, ["a = 1", "b = 2"])
    assert dump.blockLabel(b) == "Block 4\na = 1\nb = 2\n"
    assert dump.blockName(4) == "Block4"


def test_duplicate_successor_is_ignored():
    g = two_blocks()
    g.block(0).add_successor(g.block(1))
    assert g.edges() == [(0, 1)]


def test_duplicate_block_id():
    g = ControlFlowGraph()
    g.add_block(BasicBlock(0))
    with pytest.raises(ValueError):
        g.add_block(BasicBlock(0))


def test_new_block_after_explicit_ids():
    g = ControlFlowGraph()
    g.add_block(BasicBlock(4))
    assert g.new_block().id == 5


def test_predecessors_and_terminal():
    g = diamond()
    assert g.predecessors(1) == [2, 3]
    assert g.block(1).is_terminal
    assert not g.block(0).is_terminal


def test_graph_complexity_matches_decisions():
    # One two-way branch: E - N + 2P = 4 - 4 + 2.
    assert graph_complexity(diamond()) == 2
    assert graph_complexity(ControlFlowGraph()) == 0


def test_reachable_excludes_orphans():
    g = diamond()
    orphan = g.new_block()
    assert orphan.id not in g.reachable()
    assert g.reachable() == [0, 1, 2, 3]
    # The orphan is its own component.
    assert graph_complexity(g) == 4 - 5 + 2 * 2


def test_to_networkx_keeps_statements():
    nxg = diamond().to_networkx()
    assert nxg.nodes[2]["statements"] == ("y = 1",)
    assert sorted(nxg.edges()) == [(0, 2), (0, 3), (2, 1), (3, 1)]
