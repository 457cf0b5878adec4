"""
File system helpers for writing analysis artifacts.
"""
import os.path
import re


def ensureDirectoryExists(dirname):
    """Create ``dirname`` and its parents if needed. Safe to call repeatedly."""
    if dirname and not os.path.exists(dirname):
        os.makedirs(dirname, exist_ok=True)


def join(directory, name, format=None):
    """
    Join directory path with filename, optionally adding an extension.

    Example:
        join("/path/to", "output", "txt") -> "/path/to/output.txt"
    """
    if format is not None:
        name = "%s.%s" % (name, format)
    return os.path.join(directory, name)


# Characters that cannot appear in a file name on common platforms.
unsafe = re.compile(r"[\\/:*?\"<>|\s]")


def safeName(name):
    """Make ``name`` usable as a file name component.

    ``Outer.<locals>.inner`` and ``Class.method`` keep their dots; path
    separators and other reserved characters become underscores.
    """
    cleaned = unsafe.sub("_", name).strip(".")
    return cleaned or "_"


def writeData(directory, name, format, data):
    """
    Write text to ``directory/name.format``, creating the directory if
    necessary and overwriting any existing file.

    Returns:
        The path that was written.
    """
    ensureDirectoryExists(directory)
    fullname = join(directory, name, format)
    with open(fullname, "w", encoding="utf-8") as f:
        f.write(data)
    return fullname
