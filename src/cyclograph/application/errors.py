"""
Error handling for cyclograph runs.

Most conditions met while analyzing a function are not errors: functions
without a body, functions declared in header-like files and functions whose
control-flow graph cannot be built are skipped and counted. The exceptions
below cover what is left: bad input that cannot be parsed, bad
configuration, and failure to write results.
"""


class CyclographError(Exception):
    """Base class for all errors raised by cyclograph."""
    pass


class FrontendError(CyclographError):
    """
    A source file could not be turned into syntax trees.

    Attributes:
        path: The file that failed, if known.
    """

    def __init__(self, msg, path=None):
        super().__init__(msg)
        self.path = path


class ConfigError(CyclographError):
    """An option has an unknown name or an invalid value."""
    pass


class OutputError(CyclographError):
    """
    An output file could not be written.

    This is the one failure that must reach the invoking host: results that
    cannot be persisted are reported loudly instead of being dropped.
    """

    def __init__(self, msg, path=None):
        super().__init__(msg)
        self.path = path


class InternalError(CyclographError):
    """A bug in cyclograph itself, as opposed to a problem with the input."""
    pass
