"""
cyclograph CLI tools.

- analyze: score every function of the given files and write the report
  and per-function DOT files
- dot: print the control-flow graph of the functions of one file
- passes: list the registered passes
"""

from .main import main

__all__ = ["main"]
