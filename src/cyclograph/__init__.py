"""cyclograph: cyclomatic complexity and control-flow graphs of Python functions."""

__version__ = "0.1.0"
