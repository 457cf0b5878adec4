"""
Configuration for an analysis run.

``AnalysisConfig`` holds every option the pipeline and the output writer
read. Options can be set by keyword at construction, one at a time with
``set_option`` (used by the CLI and by tests), or from a mapping with
``from_mapping``. Unknown names and invalid values raise ``ConfigError``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from cyclograph.analysis.collector import KeyPolicy

from .errors import ConfigError


DEFAULT_REPORT_NAME = "complexity_results.txt"
DEFAULT_GRAPH_FORMAT = "dot"
DEFAULT_HEADER_SUFFIXES: Tuple[str, ...] = (".pyi",)


@dataclass
class AnalysisConfig:
    """Options for one run.

    Attributes:
        output_dir: Directory receiving the report and the graph files.
        report_name: File name of the text report.
        graph_format: Extension of the per-function graph files.
        emit_graphs: Whether to render and write CFG files at all.
        key_policy: How functions are keyed in the report.
        header_suffixes: File suffixes treated as header-like; functions
            declared in them are skipped.
        descend_into_nested: Count decision points inside nested callables.
        jobs: Number of worker threads used to process source files.
        json_summary: Optional path of a JSON summary file.
    """

    output_dir: str = "."
    report_name: str = DEFAULT_REPORT_NAME
    graph_format: str = DEFAULT_GRAPH_FORMAT
    emit_graphs: bool = True
    key_policy: KeyPolicy = KeyPolicy.NAME
    header_suffixes: Tuple[str, ...] = field(default=DEFAULT_HEADER_SUFFIXES)
    descend_into_nested: bool = True
    jobs: int = 1
    json_summary: Optional[str] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if isinstance(self.key_policy, str):
            self.key_policy = self._coerce_policy(self.key_policy)
        if isinstance(self.header_suffixes, str):
            self.header_suffixes = (self.header_suffixes,)
        self.header_suffixes = tuple(self.header_suffixes)
        if self.jobs < 1:
            raise ConfigError("jobs must be at least 1, got %r" % (self.jobs,))
        if not self.report_name:
            raise ConfigError("report_name must not be empty")
        if not self.graph_format or "." in self.graph_format:
            raise ConfigError("graph_format must be a bare extension, got %r" % (self.graph_format,))

    @staticmethod
    def _coerce_policy(value: str) -> KeyPolicy:
        try:
            return KeyPolicy(value)
        except ValueError:
            choices = ", ".join(p.value for p in KeyPolicy)
            raise ConfigError("unknown key policy %r (expected one of: %s)" % (value, choices))

    @classmethod
    def option_names(cls):
        return [f.name for f in dataclasses.fields(cls)]

    def set_option(self, name: str, value: Any) -> None:
        if name not in self.option_names():
            raise ConfigError("unknown option %r" % (name,))
        setattr(self, name, value)
        self.validate()

    def get_option(self, name: str) -> Any:
        if name not in self.option_names():
            raise ConfigError("unknown option %r" % (name,))
        return getattr(self, name)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "AnalysisConfig":
        config = cls()
        for name, value in options.items():
            config.set_option(name, value)
        return config

    def is_header(self, path: Optional[str]) -> bool:
        """True if ``path`` names a header-like file."""
        if not path:
            return False
        return path.endswith(self.header_suffixes)
