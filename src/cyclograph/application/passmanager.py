"""
Pass manager for per-function analyses.

Analyses are registered on an explicit ``PassManager`` object instead of a
process-wide registry, and the manager is handed to whatever drives the
analysis (normally ``cyclograph.application.pipeline.Pipeline``). This keeps
registration order and lifetime in the caller's hands.

**Key Concepts:**

1. **Passes:** a ``Pass`` has a unique name, a kind and optional
   dependencies on other passes. ``run(context, function)`` analyzes one
   ``FunctionUnit`` and returns a ``PassResult``.

2. **Dependency management:** passes are kept in dependency order (a
   topological sort); circular dependencies are rejected at registration.

3. **Pipelines:** ``build_pipeline(names)`` produces a ``PassPipeline``
   that also runs any dependency of the requested passes, in order.

4. **Failure isolation:** an exception escaping a pass is turned into a
   failed ``PassResult`` and recorded in the execution log; the remaining
   passes still run.

**Usage:**
```python
from cyclograph.application import PassManager, register_standard_passes

manager = PassManager()
register_standard_passes(manager)

pipeline = manager.build_pipeline(["cyclomatic-complexity", "cfg-dot"])
results = pipeline.run(context, function)
```
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

LOG = logging.getLogger(__name__)


class PassKind(Enum):
    """Types of passes in the system."""
    ANALYSIS = "analysis"
    RENDERING = "rendering"


class PassResult:
    """Result of running a pass on one function."""

    def __init__(self, success: bool = True, data: Any = None, error: Optional[str] = None):
        self.success = success
        self.data = data
        self.error = error

    def __bool__(self):
        return self.success

    def __repr__(self):
        if self.success:
            return "PassResult(ok, %r)" % (self.data,)
        return "PassResult(failed, %r)" % (self.error,)


@dataclass
class PassInfo:
    """Metadata for a registered pass."""
    name: str
    kind: PassKind
    description: str = ""
    dependencies: Set[str] = field(default_factory=set)

    def __post_init__(self):
        self.dependencies = set(self.dependencies)


class Pass(ABC):
    """Base class for all passes."""

    def __init__(self, name: str, kind: PassKind, description: str = "", dependencies=()):
        self.name = name
        self.kind = kind
        self.description = description
        self.info = PassInfo(name, kind, description, set(dependencies))

    @abstractmethod
    def run(self, context, function) -> PassResult:
        """Analyze ``function`` (a FunctionUnit) within ``context``."""

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name})"


class AnalysisPass(Pass):
    """Base class for passes that compute a value from a function."""

    def __init__(self, name: str, description: str = "", dependencies=()):
        super().__init__(name, PassKind.ANALYSIS, description, dependencies)


class RenderingPass(Pass):
    """Base class for passes that produce a textual artifact."""

    def __init__(self, name: str, description: str = "", dependencies=()):
        super().__init__(name, PassKind.RENDERING, description, dependencies)


class PassManager:
    """Registry of passes and runner for pass pipelines."""

    def __init__(self):
        self.passes: Dict[str, Pass] = {}
        self.pass_order: List[str] = []
        self.execution_log: List[Dict[str, Any]] = []

    def register_pass(self, pass_instance: Pass) -> None:
        """Register a pass instance."""
        if pass_instance.name in self.passes:
            raise ValueError(f"Pass '{pass_instance.name}' already registered")

        self.passes[pass_instance.name] = pass_instance
        self.pass_order.append(pass_instance.name)

        try:
            self._resolve_dependencies()
        except ValueError:
            del self.passes[pass_instance.name]
            self.pass_order.remove(pass_instance.name)
            raise

    def unregister_pass(self, pass_name: str) -> None:
        if pass_name in self.passes:
            del self.passes[pass_name]
            self.pass_order = [p for p in self.pass_order if p != pass_name]
            self._resolve_dependencies()

    def _resolve_dependencies(self) -> None:
        """Reorder ``pass_order`` so dependencies come first."""
        visited = set()
        temp_visited = set()
        order = []

        def visit(pass_name: str):
            if pass_name in temp_visited:
                raise ValueError(f"Circular dependency detected involving '{pass_name}'")
            if pass_name not in visited and pass_name in self.passes:
                temp_visited.add(pass_name)

                # Sorted so the order does not depend on set iteration.
                for dep in sorted(self.passes[pass_name].info.dependencies):
                    visit(dep)

                temp_visited.remove(pass_name)
                visited.add(pass_name)
                order.append(pass_name)

        for pass_name in list(self.pass_order):
            if pass_name not in visited:
                visit(pass_name)

        self.pass_order = order

    def _closure(self, pass_names: List[str]) -> Set[str]:
        wanted = set()
        pending = list(pass_names)
        while pending:
            name = pending.pop()
            if name not in self.passes:
                raise ValueError(f"Unknown pass '{name}'")
            if name in wanted:
                continue
            wanted.add(name)
            pending.extend(self.passes[name].info.dependencies)
        return wanted

    def build_pipeline(self, pass_names: List[str]) -> "PassPipeline":
        """Pipeline running ``pass_names`` and their dependencies, in dependency order."""
        wanted = self._closure(pass_names)
        return PassPipeline(self, [name for name in self.pass_order if name in wanted])

    def run_pipeline(self, context, function, pipeline: "PassPipeline") -> Dict[str, PassResult]:
        """Run every pass of ``pipeline`` on one function."""
        results = {}
        for pass_name in pipeline.passes:
            if pass_name not in self.passes:
                raise ValueError(f"Unknown pass '{pass_name}' in pipeline")
            results[pass_name] = self._run_pass(self.passes[pass_name], context, function)
        return results

    def run_all_passes(self, context, function) -> Dict[str, PassResult]:
        return self.run_pipeline(context, function, PassPipeline(self, self.pass_order))

    def _run_pass(self, pass_obj: Pass, context, function) -> PassResult:
        start_time = time.perf_counter()
        try:
            result = pass_obj.run(context, function)
        except Exception as e:
            LOG.error("Pass '%s' failed on %r: %s", pass_obj.name, function, e)
            result = PassResult(success=False, error=str(e))

        # Failed runs only.
        if not result.success:
            self.execution_log.append({
                'pass': pass_obj.name,
                'function': getattr(function, "qualname", None),
                'time': time.perf_counter() - start_time,
                'error': result.error,
            })
        return result

    def get_pass_info(self, pass_name: str) -> Optional[PassInfo]:
        if pass_name in self.passes:
            return self.passes[pass_name].info
        return None

    def list_passes(self) -> List[str]:
        return list(self.pass_order)

    def get_execution_log(self) -> List[Dict[str, Any]]:
        return self.execution_log.copy()


class PassPipeline:
    """A specific sequence of passes to run on each function."""

    def __init__(self, manager: PassManager, passes: List[str]):
        self.manager = manager
        self.passes = list(passes)

    def run(self, context, function) -> Dict[str, PassResult]:
        return self.manager.run_pipeline(context, function, self)

    def __contains__(self, pass_name: str) -> bool:
        return pass_name in self.passes

    def __repr__(self):
        return "PassPipeline(%s)" % ", ".join(self.passes)


def create_analysis_pass(name: str, run_func: Callable, description: str = "",
                         dependencies=()) -> AnalysisPass:
    """Create an analysis pass from a ``run_func(context, function)`` callable.

    The callable's return value becomes the result data.
    """
    class FunctionAnalysisPass(AnalysisPass):
        def __init__(self):
            super().__init__(name, description, dependencies)
            self._run_func = run_func

        def run(self, context, function) -> PassResult:
            return PassResult(success=True, data=self._run_func(context, function))

    return FunctionAnalysisPass()
