"""
Standard passes.

**Analysis Passes:**
- ``cyclomatic-complexity``: McCabe score of the function's syntax tree,
  recorded in the run's ResultCollector and echoed as a status line.
- ``cfg-metrics``: E - N + 2P and reachability computed on the CFG, kept
  for the JSON summary.

**Rendering Passes:**
- ``cfg-dot``: DOT text of the function's CFG, kept in the context's graph
  table for the output writer.

Passes never touch the file system; writing results is the job of
``cyclograph.application.output``.
"""

from cyclograph.analysis.cfg.dump import CFGToDot
from cyclograph.analysis.cfg.graph import graph_complexity
from cyclograph.analysis.collector import function_key
from cyclograph.analysis.complexity import ComplexityScorer

from .passmanager import AnalysisPass, RenderingPass, PassResult

COMPLEXITY_PASS = "cyclomatic-complexity"
CFG_DOT_PASS = "cfg-dot"
CFG_METRICS_PASS = "cfg-metrics"

STATUS_FORMAT = "Function: %s, Complexity: %d"


class ComplexityPass(AnalysisPass):
    """Cyclomatic complexity of each function."""

    def __init__(self):
        super().__init__(COMPLEXITY_PASS, "Calculate cyclomatic complexity")

    def run(self, context, function) -> PassResult:
        scorer = ComplexityScorer(context.config.descend_into_nested)
        complexity = scorer.score(function.syntax)
        key = context.collector.add(function, complexity)

        breakdown = scorer.breakdown(function.syntax)
        context.add_details(
            key,
            function,
            complexity=complexity,
            decisions={kind.value: count for kind, count in sorted(
                breakdown.items(), key=lambda item: item[0].value)},
        )
        context.console.output(STATUS_FORMAT % (function.name, complexity), 0)
        return PassResult(success=True, data=complexity)


class CFGRenderPass(RenderingPass):
    """DOT rendering of each function's control-flow graph."""

    def __init__(self):
        super().__init__(CFG_DOT_PASS, "Generate CFG as DOT text")
        self.renderer = CFGToDot()

    def run(self, context, function) -> PassResult:
        text = self.renderer.render(function.cfg)
        context.add_graph(function_key(function, context.config.key_policy), text)
        return PassResult(success=True, data=text)


class GraphMetricsPass(AnalysisPass):
    """Graph-shaped metrics of the CFG."""

    def __init__(self):
        super().__init__(CFG_METRICS_PASS, "E - N + 2P and reachability of the CFG")

    def run(self, context, function) -> PassResult:
        cfg = function.cfg
        if cfg is None:
            return PassResult(success=True, data=None)
        reachable = cfg.reachable()
        data = {
            "blocks": len(cfg),
            "edges": len(cfg.edges()),
            "unreachable_blocks": len(cfg) - len(reachable),
            "graph_complexity": graph_complexity(cfg),
        }
        context.add_details(function_key(function, context.config.key_policy), function, **data)
        return PassResult(success=True, data=data)


def register_standard_passes(manager):
    """Register the standard passes on ``manager`` and return it."""
    manager.register_pass(ComplexityPass())
    manager.register_pass(CFGRenderPass())
    manager.register_pass(GraphMetricsPass())
    return manager


def default_pass_names(config):
    names = [COMPLEXITY_PASS, CFG_METRICS_PASS]
    if config.emit_graphs:
        names.append(CFG_DOT_PASS)
    return names
