"""
Shared state of an analysis run.

The ``AnalysisContext`` is created once per run and handed to every pass.
It carries the console, the configuration, the result collector and the
tables the output writer reads at the end of the run.
"""

import collections
import threading

from cyclograph.analysis.collector import ResultCollector
from cyclograph.util.application.console import Console

from .config import AnalysisConfig

# Reasons a function is not analyzed.
SKIP_NO_BODY = "no-body"
SKIP_HEADER = "header"
SKIP_NO_CFG = "no-cfg"


class AnalysisContext(object):
    """
    Attributes:
        console: Console used for status lines and phase timing.
        config: AnalysisConfig of the run.
        collector: ResultCollector receiving complexity scores.
        graphs: Rendered DOT text per function key, in analysis order.
        details: Extra per-function data (decision breakdown, graph metrics)
            for the JSON summary.
        stats: Counters: ``analyzed``, ``files``, ``failed_files`` and one
            ``skipped:<reason>`` entry per skip reason.
        failures: FrontendErrors of the files that could not be read.
    """
    __slots__ = (
        "console", "config", "collector", "graphs", "details", "stats", "failures",
        "_detail_owners", "_lock",
    )

    def __init__(self, console=None, config=None):
        self.console = console if console is not None else Console()
        self.config = config if config is not None else AnalysisConfig()
        self.collector = ResultCollector(self.config.key_policy)
        self.graphs = collections.OrderedDict()
        self.details = collections.OrderedDict()
        self.stats = collections.Counter()
        self.failures = []
        self._detail_owners = {}
        self._lock = threading.Lock()

    def count(self, name, amount=1):
        with self._lock:
            self.stats[name] += amount

    def skipped(self, reason):
        self.count("skipped:%s" % reason)

    def add_graph(self, key, text):
        """Store the DOT text of ``key``; None drops a graph left by an earlier function."""
        with self._lock:
            if text is None:
                self.graphs.pop(key, None)
            else:
                self.graphs[key] = text

    def add_details(self, key, function, **data):
        """Merge ``data`` into the entry of ``key``; another function under the same key replaces it."""
        owner = (function.path, function.line, function.qualname)
        with self._lock:
            if self._detail_owners.get(key) != owner:
                self._detail_owners[key] = owner
                self.details[key] = {}
            self.details[key].update(data)
