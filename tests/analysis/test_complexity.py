"""
Tests for cyclomatic complexity scoring over hand-built syntax trees.

The trees mirror what a front-end produces: an OTHER root for the function
body and one node per construct below it.
"""

import unittest

import pytest

from cyclograph.analysis.complexity import BASE_COMPLEXITY, ComplexityScorer, score
from cyclograph.analysis.syntax import DECISION_KINDS, SyntaxKind, SyntaxNode, block, node

K = SyntaxKind


def leaf(label="stmt"):
    return node(K.OTHER, label=label)


class TestScoring(unittest.TestCase):
    def setUp(self):
        self.scorer = ComplexityScorer()

    def testNoDecisions(self):
        body = block([leaf("assign"), leaf("call"), leaf("return")])
        self.assertEqual(self.scorer.score(body), 1)

    def testEmptyBody(self):
        self.assertEqual(self.scorer.score(block([])), BASE_COMPLEXITY)

    def testSingleIf(self):
        body = block([node(K.CONDITIONAL, leaf("test"), leaf("then"))])
        self.assertEqual(self.scorer.score(body), 2)

    def testForContainingIf(self):
        loop = node(K.FOR_LOOP, leaf("iter"), node(K.CONDITIONAL, leaf("test")))
        self.assertEqual(self.scorer.score(block([loop])), 3)

    def testSwitchWithThreeCases(self):
        switch = node(
            K.SWITCH,
            leaf("subject"),
            node(K.SWITCH_CASE, leaf()),
            node(K.SWITCH_CASE, leaf()),
            node(K.SWITCH_CASE, leaf()),
        )
        self.assertEqual(self.scorer.score(block([switch])), 5)

    def testEveryDecisionKindCountsOnce(self):
        body = block([node(kind) for kind in sorted(DECISION_KINDS, key=lambda k: k.value)])
        self.assertEqual(self.scorer.score(body), len(DECISION_KINDS) + 1)

    def testDeepNestingIsFlat(self):
        inner = node(K.WHILE_LOOP, leaf())
        for _ in range(5):
            inner = node(K.CONDITIONAL, inner)
        # 1 while + 5 ifs, regardless of depth.
        self.assertEqual(self.scorer.score(block([inner])), 7)

    def testDeepTreeDoesNotRecurse(self):
        inner = leaf()
        for _ in range(5000):
            inner = node(K.TERNARY, inner)
        self.assertEqual(self.scorer.score(inner), 5001)

    def testNoneRoot(self):
        self.assertEqual(self.scorer.count_decisions(None), 0)
        self.assertEqual(self.scorer.score(None), 1)

    def testPure(self):
        body = block([node(K.CONDITIONAL), node(K.DO_WHILE_LOOP, node(K.TERNARY))])
        first = self.scorer.score(body)
        self.assertEqual(first, 4)
        self.assertEqual(self.scorer.score(body), first)
        self.assertEqual(score(body), first)


class TestNestedScopes(unittest.TestCase):
    def nested(self):
        helper = node(K.OTHER, node(K.CONDITIONAL), node(K.FOR_LOOP), opens_scope=True)
        return block([node(K.CONDITIONAL), helper])

    def testDescendByDefault(self):
        self.assertEqual(ComplexityScorer().score(self.nested()), 4)

    def testStopAtNestedScopes(self):
        scorer = ComplexityScorer(descend_into_nested=False)
        self.assertEqual(scorer.score(self.nested()), 2)

    def testRootIsAlwaysScored(self):
        root = node(K.OTHER, node(K.CONDITIONAL), opens_scope=True)
        self.assertEqual(ComplexityScorer(descend_into_nested=False).score(root), 2)


def test_breakdown_counts_per_kind():
    body = block([
        node(K.CONDITIONAL),
        node(K.FOR_LOOP, node(K.CONDITIONAL)),
        leaf(),
    ])
    breakdown = ComplexityScorer().breakdown(body)
    assert breakdown[K.CONDITIONAL] == 2
    assert breakdown[K.FOR_LOOP] == 1
    assert K.OTHER not in breakdown


def test_none_child_is_rejected():
    with pytest.raises(ValueError):
        SyntaxNode(K.OTHER, (leaf(), None))


def test_children_are_stored_as_tuple():
    n = SyntaxNode(K.CONDITIONAL, [leaf(), leaf()])
    assert isinstance(n.children, tuple)
    assert n.is_decision
    assert not leaf().is_decision


def test_walk_is_preorder():
    tree = node(K.OTHER, node(K.CONDITIONAL, leaf("a")), leaf("b"), label="root")
    assert [n.label or n.kind.value for n in tree.walk()] == ["root", "if", "a", "b"]
