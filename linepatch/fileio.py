"""
File I/O glue — plain reads, atomic writes, deletes and the binary sniff.

Errors from the operating system are raised as-is (``OSError`` and its
subclasses); nothing here retries.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 1024

# Text is decoded with surrogateescape so undecodable bytes survive a
# read → edit → write cycle unchanged.
ENCODING = "utf-8"
ERRORS = "surrogateescape"


def read_file(path: str) -> bytes:
    """Return the raw bytes of *path*."""
    with open(path, "rb") as f:
        return f.read()


def read_text(path: str) -> str:
    return read_file(path).decode(ENCODING, ERRORS)


def write_file(path: str, data: bytes) -> None:
    """Write *data* to *path* atomically via temp file + rename.

    The temp file lives in the destination directory so the final rename
    never crosses a file-system boundary.  An existing file keeps its
    permission bits.
    """
    abs_path = os.path.abspath(path)
    directory = os.path.dirname(abs_path)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".linepatch-")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        try:
            mode = stat.S_IMODE(os.stat(abs_path).st_mode)
        except FileNotFoundError:
            pass
        else:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, abs_path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    logger.debug("[FileIO] Wrote %d bytes to %s", len(data), abs_path)


def write_text(path: str, content: str) -> None:
    write_file(path, content.encode(ENCODING, ERRORS))


def delete_file(path: str) -> None:
    os.remove(path)


def create_dir(path: str) -> None:
    """Create *path* and any missing parents; existing directories are fine."""
    os.makedirs(path, exist_ok=True)


def delete_dir(path: str) -> None:
    """Remove *path* recursively; a missing directory is not an error."""
    if os.path.lexists(path):
        shutil.rmtree(path)


def is_binary(path: str, sniff_bytes: int = BINARY_SNIFF_BYTES) -> bool:
    """Heuristic: a NUL byte in the first *sniff_bytes* marks a binary file.

    Unreadable files report False; the caller's own open will fail on them.
    """
    try:
        with open(path, "rb") as f:
            chunk = f.read(sniff_bytes)
    except OSError:
        return False
    return b"\x00" in chunk
