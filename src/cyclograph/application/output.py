"""
Persistence of analysis results.

``OutputWriter`` is the only component that touches the file system. It
writes:

- the report (``complexity_results.txt`` by default), one
  ``Function: <name>, Cyclomatic Complexity: <N>`` line per function;
- one ``<name>_cfg.<format>`` file per rendered graph, overwriting any file
  of the same name;
- optionally a JSON summary with per-function details and run statistics.

Relative paths are resolved against the configured output directory. Any
``OSError`` is re-raised as ``OutputError`` naming the path.
"""

import json
import logging
import os

from cyclograph.util.io import filesystem

from .errors import OutputError

LOG = logging.getLogger(__name__)

GRAPH_SUFFIX = "_cfg"


def graphFileName(key):
    return filesystem.safeName(key) + GRAPH_SUFFIX


class OutputWriter(object):
    """Writes the results held by an AnalysisContext."""

    def __init__(self, config):
        self.config = config

    def _write(self, relpath, format, data):
        directory, name = os.path.split(os.path.join(self.config.output_dir, relpath))
        path = filesystem.join(directory, name, format)
        try:
            filesystem.writeData(directory, name, format, data)
        except OSError as e:
            raise OutputError("cannot write %s: %s" % (path, e.strerror or e), path) from e
        LOG.debug("wrote %s", path)
        return path

    def write_report(self, context):
        """Write the complexity report and return its path."""
        return self._write(self.config.report_name, None, context.collector.serialize())

    def write_graphs(self, context):
        """Write one file per rendered graph and return the paths."""
        return [
            self._write(graphFileName(key), self.config.graph_format, text)
            for key, text in context.graphs.items()
        ]

    def summary(self, context):
        functions = []
        for key, score in context.collector.record.items():
            entry = {"function": key, "complexity": score}
            entry.update(context.details.get(key, {}))
            functions.append(entry)
        return {
            "functions": functions,
            "collisions": list(context.collector.collisions),
            "stats": dict(sorted(context.stats.items())),
        }

    def write_summary(self, context):
        """Write the JSON summary if one was requested; return its path or None."""
        if not self.config.json_summary:
            return None
        text = json.dumps(self.summary(context), indent=2) + "\n"
        return self._write(self.config.json_summary, None, text)

    def write_all(self, context):
        """Write every artifact; returns the list of written paths."""
        paths = [self.write_report(context)]
        if self.config.emit_graphs:
            paths.extend(self.write_graphs(context))
        summary = self.write_summary(context)
        if summary:
            paths.append(summary)
        return paths
