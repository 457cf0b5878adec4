"""
Console output with timed, nested scopes.

Analysis phases are wrapped in ``console.scope(name)`` blocks that print a
``begin``/``end`` pair with the elapsed time. Per-function status lines go
through ``console.output`` so they interleave correctly with the phase
markers.
"""

import sys
import threading
import time

from cyclograph.util.io import formatting


class Scope(object):
    """A node in the tree of timed console scopes."""

    def __init__(self, parent, name):
        self.parent = parent
        self.name = name
        self._start = None
        self._end = None

    def begin(self):
        self._start = time.perf_counter()

    def end(self):
        self._end = time.perf_counter()

    @property
    def elapsed(self):
        return self._end - self._start

    def path(self):
        """Scope names from the root (excluded) down to this scope."""
        if self.parent is None:
            return ()
        else:
            return self.parent.path() + (self.name,)

    def child(self, name):
        return Scope(self, name)


class ConsoleScopeManager(object):
    """
    Context manager returned by ``Console.scope``.

    Example:
        with console.scope("analysis"):
            ...
    """

    __slots__ = "console", "name"

    def __init__(self, console, name):
        self.console = console
        self.name = name

    def __enter__(self):
        self.console.begin(self.name)
        return self.console

    def __exit__(self, type, value, tb):
        self.console.end()


class Console(object):
    """Hierarchical console output with timing.

    Attributes:
        out: Output stream (default: sys.stdout).
        root: Root scope of the hierarchy.
        current: Currently active scope.
        verbose: Print ``verbose_output`` lines and scope markers.
        quiet: Suppress everything, status lines included.
    """

    def __init__(self, out=None, verbose=False, quiet=False):
        if out is None:
            out = sys.stdout
        self.out = out

        self.root = Scope(None, "root")
        self.current = self.root

        self.verbose = verbose
        self.quiet = quiet
        self._lock = threading.Lock()

    def path(self):
        """Formatted path of the current scope, e.g. ``[ analysis | module.py ]``."""
        return "[ %s ]" % " | ".join(self.current.path())

    def begin(self, name):
        scope = self.current.child(name)
        scope.begin()
        self.current = scope

        self.verbose_output("begin %s" % self.path(), 0)

    def end(self):
        self.current.end()
        self.verbose_output(
            "end   %s %s" % (self.path(), formatting.elapsedTime(self.current.elapsed)),
            0,
        )
        self.current = self.current.parent

    def scope(self, name):
        return ConsoleScopeManager(self, name)

    def output(self, s, tabs=1):
        """Write one line, indented by ``tabs`` tab characters."""
        if self.quiet:
            return
        with self._lock:
            if tabs:
                self.out.write("\t" * tabs)
            self.out.write(s)
            self.out.write("\n")

    def verbose_output(self, s, tabs=1):
        if self.verbose:
            self.output(s, tabs)
