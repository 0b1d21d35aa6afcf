"""
Exception hierarchy shared by the editing and search packages.

File-system failures are not wrapped: ``OSError`` propagates unchanged.
"""

from __future__ import annotations

from typing import Optional


class LinePatchError(Exception):
    """Base class for every error raised by linepatch."""


class EditValidationError(LinePatchError, ValueError):
    """Raised when an edit request is rejected before any mutation."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        action: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.line_number = line_number
        self.action = action


class PatchParseError(EditValidationError):
    """Raised when a JSON line patch cannot be decoded."""


class SearchPatternError(LinePatchError, ValueError):
    """Raised when a search query does not compile to a valid pattern."""

    def __init__(self, message: str, pattern: str = "") -> None:
        super().__init__(message)
        self.pattern = pattern


class DeltaError(LinePatchError, ValueError):
    """Raised when a whole-file delta does not fit its source text."""
