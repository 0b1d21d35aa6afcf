"""
Object-style facade over :mod:`linepatch.fileio` for callers that prefer to
pass file and directory handles around.
"""

from __future__ import annotations

from . import fileio
from .editing.patch_applier import PatchType, apply_patch_to_file
from .editing.lines import to_line_map


class File:
    def __init__(self, path: str) -> None:
        self.path = path

    def read(self) -> bytes:
        return fileio.read_file(self.path)

    def write(self, data: bytes) -> None:
        fileio.write_file(self.path, data)

    def delete(self) -> None:
        fileio.delete_file(self.path)

    def line_map(self) -> dict[str, str]:
        """The file's content keyed by 1-based line number."""
        return to_line_map(fileio.read_text(self.path))

    def patch(self, patch_json: str,
              patch_type: PatchType = PatchType.REPLACING) -> str:
        return apply_patch_to_file(self.path, patch_json, patch_type)

    def __repr__(self) -> str:
        return f"File({self.path!r})"


class Dir:
    def __init__(self, path: str) -> None:
        self.path = path

    def create(self) -> None:
        fileio.create_dir(self.path)

    def delete(self) -> None:
        fileio.delete_dir(self.path)

    def __repr__(self) -> str:
        return f"Dir({self.path!r})"


class FileSystem:
    """Hands out :class:`File` and :class:`Dir` handles."""

    def file(self, path: str) -> File:
        return File(path)

    def dir(self, path: str) -> Dir:
        return Dir(path)
