"""
Utility modules shared by the cyclograph analysis layers.

- Type-based dispatch used by the front-end (typedispatch.py)
- Console output with timed scopes (application/)
- DOT emission, formatting and file output helpers (io/)
"""
