"""
cyclograph application layer.

**Core Components:**

1. **Program Representation** (`program.py`):
   - `TranslationUnit`: the functions of one source file
   - `FunctionUnit`: one function with its syntax tree and CFG

2. **Pipeline** (`pipeline.py`):
   - `Pipeline`: parses source files and runs the passes on each function

3. **Pass Manager** (`passmanager.py`):
   - `PassManager`, `PassPipeline`, `Pass`, `AnalysisPass`, `RenderingPass`

4. **Standard Passes** (`passes.py`):
   - `cyclomatic-complexity`, `cfg-dot`, `cfg-metrics`

5. **Context and Output** (`context.py`, `output.py`):
   - `AnalysisContext`: per-run state
   - `OutputWriter`: writes the report, the DOT files and the JSON summary

6. **Configuration and Errors** (`config.py`, `errors.py`)

**Usage:**
```python
from cyclograph.application import Pipeline, OutputWriter

pipeline = Pipeline()
context = pipeline.run(["src/"])
OutputWriter(pipeline.config).write_all(context)
```
"""

from .program import FunctionUnit, TranslationUnit
from .config import AnalysisConfig
from .context import AnalysisContext
from .errors import CyclographError, ConfigError, FrontendError, InternalError, OutputError
from .passmanager import (
    AnalysisPass,
    Pass,
    PassInfo,
    PassKind,
    PassManager,
    PassPipeline,
    PassResult,
    RenderingPass,
    create_analysis_pass,
)
from .passes import register_standard_passes
from .output import OutputWriter
from .pipeline import Pipeline

__all__ = [
    "FunctionUnit",
    "TranslationUnit",
    "AnalysisConfig",
    "AnalysisContext",
    "CyclographError",
    "ConfigError",
    "FrontendError",
    "InternalError",
    "OutputError",
    "AnalysisPass",
    "Pass",
    "PassInfo",
    "PassKind",
    "PassManager",
    "PassPipeline",
    "PassResult",
    "RenderingPass",
    "create_analysis_pass",
    "register_standard_passes",
    "OutputWriter",
    "Pipeline",
]
