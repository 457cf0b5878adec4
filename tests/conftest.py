from __future__ import annotations

import io
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional

import pytest

from cyclograph.application import AnalysisConfig, OutputWriter, Pipeline
from cyclograph.application.program import FunctionUnit, TranslationUnit
from cyclograph.frontend import FunctionExtractor
from cyclograph.util.application.console import Console


def _normalize_code(code: str) -> str:
    # Allow indented triple-quoted snippets in tests.
    code = textwrap.dedent(code)
    # Trim leading blank line to keep expected line numbers stable.
    code = code.lstrip("\n")
    if code and not code.endswith("\n"):
        code += "\n"
    return code


@dataclass(frozen=True)
class RunResult:
    pipeline: Pipeline
    context: Any
    written: List[str]
    output: str

    @property
    def scores(self) -> dict:
        return self.context.collector.record.to_dict()

    def report(self) -> str:
        return Path(self.written[0]).read_text(encoding="utf-8")


class Analyzer:
    """
    Small harness around Pipeline that:
    - writes one or many source files into a temporary directory
    - runs the real front-end and pass pipeline on them
    - writes the results into ``<tmp>/out``
    """

    def __init__(self, tmp_path: Path):
        self._tmp_path = tmp_path

    def write(self, files: Mapping[str, str]) -> List[str]:
        paths = []
        for rel_name, code in files.items():
            p = self._tmp_path / "src" / rel_name
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(_normalize_code(code), encoding="utf-8")
            paths.append(str(p))
        return paths

    def run_files(
        self,
        files: Mapping[str, str],
        *,
        strict: bool = False,
        config_overrides: Optional[Mapping[str, Any]] = None,
    ) -> RunResult:
        config = AnalysisConfig(output_dir=str(self._tmp_path / "out"))
        for k, v in (config_overrides or {}).items():
            config.set_option(k, v)

        paths = self.write(files)
        out = io.StringIO()
        pipeline = Pipeline(config=config, strict=strict)
        context = pipeline.run(paths, pipeline.create_context(Console(out)))
        written = OutputWriter(config).write_all(context)
        return RunResult(pipeline, context, written, out.getvalue())


@pytest.fixture()
def analyze(tmp_path: Path):
    analyzer = Analyzer(tmp_path)

    def _analyze(code: str, *, filename: str = "sample.py", **kwargs) -> RunResult:
        return analyzer.run_files({filename: code}, **kwargs)

    # expose the richer harness too
    _analyze.files = analyzer.run_files  # type: ignore[attr-defined]
    _analyze.write = analyzer.write  # type: ignore[attr-defined]
    return _analyze


@pytest.fixture()
def extract():
    extractor = FunctionExtractor()

    def _extract(code: str, path: str = "sample.py") -> TranslationUnit:
        return extractor.extract_source(_normalize_code(code), path)

    return _extract


@pytest.fixture()
def function(extract):
    """The function named ``name`` (bare or qualified) defined in ``code``."""

    def _function(code: str, name: Optional[str] = None) -> FunctionUnit:
        unit = extract(code)
        if name is None:
            assert len(unit) == 1, unit.functions
            return unit.functions[0]
        matches = [f for f in unit if name in (f.name, f.qualname)]
        assert len(matches) == 1, matches
        return matches[0]

    return _function
