"""Reading a file into rows and writing rows back to disk."""

import logging
import os
import shutil
import tempfile
from typing import Iterable

logger = logging.getLogger(__name__)

NEW_FILE_MODE = 0o644


def load_lines(path: str) -> list[bytes]:
    """Read ``path`` and return its lines without line terminators.

    Raises:
        OSError: the file is missing or unreadable.
    """
    lines = []
    with open(path, 'rb') as f:
        for line in f:
            lines.append(line.rstrip(b"\r\n"))
    logger.info("loaded %d lines from %s", len(lines), path)
    return lines


def save_lines(path: str, lines: Iterable[bytes]) -> int:
    """Write ``lines`` to ``path``, each followed by a newline, atomically.

    The content goes to a temporary file in the same directory which then
    replaces ``path``, so a failed save leaves the old file untouched.

    Returns:
        Number of bytes written.

    Raises:
        OSError: the temporary file could not be written or renamed.
    """
    content = b"".join(bytes(line) + b"\n" for line in lines)
    dir_name = os.path.dirname(path) or '.'
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name,
                                         prefix='.' + os.path.basename(path),
                                         suffix='.tmp', delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        if os.path.exists(path):
            shutil.copymode(path, temp_filename)
        else:
            os.chmod(temp_filename, NEW_FILE_MODE)
        os.replace(temp_filename, path)
    except OSError:
        if temp_filename is not None and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                logger.warning("could not remove temporary file %s", temp_filename)
        raise
    logger.info("wrote %d bytes to %s", len(content), path)
    return len(content)
