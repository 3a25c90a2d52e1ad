"""Standard input and template file helpers."""

import os
import stat
import sys
from pathlib import Path


def stdin_has_data() -> bool:
    """Check whether standard input is a pipe or a file with data.

    A terminal never counts as having data, so interactive sessions are
    not mistaken for piped input. A pipe or socket always counts, even
    before the writer has produced anything.
    """
    try:
        if sys.stdin is None or sys.stdin.isatty():
            return False
        info = os.fstat(sys.stdin.fileno())
    except (OSError, ValueError, AttributeError):
        return False

    if stat.S_ISREG(info.st_mode):
        return info.st_size > 0
    return stat.S_ISFIFO(info.st_mode) or stat.S_ISSOCK(info.st_mode)


def read_file(path: str) -> str:
    """Read a template file, or all of stdin when path is '-' or empty.

    Raises:
        OSError: If the file cannot be read
    """
    if path in ("", "-"):
        return sys.stdin.read()
    return Path(path).read_text()
