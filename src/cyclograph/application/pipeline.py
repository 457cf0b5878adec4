"""Analysis pipeline.

The ``Pipeline`` drives a ``PassManager`` over every function of every
source file:

1. Source files are parsed by the front-end, on a thread pool when
   ``config.jobs`` is greater than one. Parsing is the only concurrent
   part; results come back in input order.
2. Each function goes through the skip rules (no body, declared in a
   header-like file) and then through the pass pipeline, in source order,
   on the calling thread.
3. Files that fail to parse are recorded in ``context.failures`` and the
   run continues, unless the pipeline is strict.

Writing results is left to ``cyclograph.application.output``.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor

from cyclograph.frontend import function_extractor

from .config import AnalysisConfig
from .context import SKIP_HEADER, SKIP_NO_BODY, SKIP_NO_CFG, AnalysisContext
from .errors import FrontendError, InternalError
from .passes import default_pass_names, register_standard_passes
from .passmanager import PassManager

LOG = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".py",)


def find_sources(paths, header_suffixes=()):
    """
    Expand ``paths`` into source files.

    Files are kept as given; directories are searched recursively for
    ``.py`` files and header-like files, sorted by path. Hidden directories
    are not searched.
    """
    suffixes = SOURCE_SUFFIXES + tuple(header_suffixes)
    for path in paths:
        if not os.path.isdir(path):
            yield path
            continue
        found = []
        for root, dirs, files in os.walk(path):
            dirs[:] = [d for d in dirs if not d.startswith(".")]
            found.extend(os.path.join(root, f) for f in files if f.endswith(suffixes))
        yield from sorted(found)


class Pipeline(object):
    """Runs the pass pipeline over source files.

    Attributes:
        manager: PassManager holding the registered passes.
        config: AnalysisConfig of the run.
        extractor: Front-end turning files into TranslationUnits.
        pass_names: Passes requested for each function; dependencies are
            added by the manager.
        strict: Re-raise the first FrontendError instead of continuing.
    """

    def __init__(self, manager=None, config=None, extractor=None, strict=False):
        self.config = config if config is not None else AnalysisConfig()
        if manager is None:
            manager = register_standard_passes(PassManager())
        self.manager = manager
        if extractor is None:
            extractor = function_extractor.FunctionExtractor(self.config)
        self.extractor = extractor
        self.pass_names = default_pass_names(self.config)
        self.strict = strict

    def create_context(self, console=None):
        return AnalysisContext(console, self.config)

    def analyze_function(self, context, function, pipeline):
        """Run ``pipeline`` on one function; returns the pass results, or None if skipped."""
        if not function.has_body:
            LOG.debug("skipping %r: no body", function)
            context.skipped(SKIP_NO_BODY)
            return None

        if function.in_header:
            LOG.debug("skipping %r: declared in %s", function, function.path)
            context.skipped(SKIP_HEADER)
            return None

        if function.syntax is None:
            raise InternalError("%r has a body but no syntax tree" % (function,))

        if function.cfg is None:
            # Scored from its syntax tree; graph passes see no CFG.
            LOG.debug("%r has no CFG", function)
            context.skipped(SKIP_NO_CFG)

        results = pipeline.run(context, function)
        context.count("analyzed")
        for name, result in results.items():
            if not result:
                context.count("failed:%s" % name)
        return results

    def analyze_unit(self, context, unit, pipeline=None):
        if pipeline is None:
            pipeline = self.manager.build_pipeline(self.pass_names)
        with context.console.scope(unit.path):
            for function in unit:
                self.analyze_function(context, function, pipeline)

    def analyze_source(self, source, path="<string>", context=None):
        """Analyze source text; FrontendError propagates."""
        if context is None:
            context = self.create_context()
        self.analyze_unit(context, self.extractor.extract_source(source, path))
        return context

    def _extract(self, path):
        try:
            return path, self.extractor.extract_file(path), None
        except FrontendError as e:
            return path, None, e

    def extract_all(self, paths):
        """Yield ``(path, unit, error)`` for each path, in input order."""
        if self.config.jobs == 1:
            yield from map(self._extract, paths)
            return
        with ThreadPoolExecutor(max_workers=self.config.jobs) as pool:
            yield from pool.map(self._extract, paths)

    def run(self, paths, context=None):
        """Analyze every source file under ``paths``.

        Returns:
            The AnalysisContext holding the results.
        Raises:
            FrontendError: In strict mode, for the first unreadable file.
        """
        if context is None:
            context = self.create_context()
        pipeline = self.manager.build_pipeline(self.pass_names)
        LOG.debug("running %r", pipeline)

        sources = list(find_sources(paths, self.config.header_suffixes))
        with context.console.scope("analysis"):
            for path, unit, error in self.extract_all(sources):
                context.count("files")
                if error is not None:
                    if self.strict:
                        raise error
                    LOG.error("%s", error)
                    context.count("failed_files")
                    context.failures.append(error)
                    continue
                self.analyze_unit(context, unit, pipeline)

        return context
