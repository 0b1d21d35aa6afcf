"""
Edit workflow — validates, previews, confirms, applies and persists a set of
structured replace/insert edits against one file.

Nothing is written unless every step succeeds and the edit is confirmed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO

from .. import fileio
from ..errors import EditValidationError
from .edit_set import EditInstruction, EditSet, merge_edits, validate_edits
from .lines import join_lines, split_lines
from .preview import DEFAULT_CONTEXT_LINES, render_edit_preview

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]


@dataclass
class FileEditRequest:
    """A file path plus the structured edits to apply to it."""
    file_path: str
    edits: list[EditInstruction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "FileEditRequest":
        if not isinstance(data, dict):
            raise EditValidationError("edit request must be a JSON object")
        file_path = data.get("file_path")
        if not isinstance(file_path, str) or not file_path:
            raise EditValidationError("edit request is missing 'file_path'")
        raw_edits = data.get("edits", [])
        if not isinstance(raw_edits, list):
            raise EditValidationError(
                "'edits' must be a list", file_path=file_path,
            )
        edits = [EditInstruction.from_dict(e, file_path) for e in raw_edits]
        return cls(file_path=file_path, edits=edits)

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "edits": [e.to_dict() for e in self.edits],
        }


def load_edit_request(text: str) -> FileEditRequest:
    """Parse the JSON wire form of an edit request."""
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise EditValidationError(f"malformed edit request JSON: {exc}") from exc
    return FileEditRequest.from_dict(data)


@dataclass
class EditResult:
    """Outcome of one :meth:`EditApplier.apply` call."""
    file_path: str
    applied: bool = False
    aborted: bool = False
    edits_applied: int = 0
    line_count_before: int = 0
    line_count_after: int = 0
    content: str = ""


class EditApplier:
    """Apply structured edits to a single file.

    Parameters
    ----------
    confirm:
        Capability asked ``confirm(question) -> bool`` before writing.
        ``None`` applies without asking.
    preview:
        Write a rendered preview of every edit to *output* first.
    highlight:
        Use background highlighting instead of ``-``/``+`` colours.
    output:
        Stream for previews and status lines; ``None`` disables them.
    """

    def __init__(
        self,
        confirm: Optional[ConfirmFn] = None,
        preview: bool = False,
        highlight: bool = False,
        context_lines: int = DEFAULT_CONTEXT_LINES,
        output: Optional[TextIO] = None,
        color: bool = True,
    ) -> None:
        self._confirm = confirm
        self._preview = preview
        self._highlight = highlight
        self._context_lines = context_lines
        self._output = output
        self._color = color

    def apply(self, request: FileEditRequest) -> EditResult:
        """Run validate → sort → preview → confirm → merge → persist."""
        content = fileio.read_text(request.file_path)
        lines = split_lines(content)
        result = EditResult(file_path=request.file_path,
                            line_count_before=len(lines))

        validate_edits(request.edits, len(lines), request.file_path)
        edit_set = EditSet.from_instructions(request.edits)

        if self._preview:
            self._write(f"Proposed changes for {request.file_path}:")
            for edit in edit_set:
                self._write("\n" + render_edit_preview(
                    edit, lines, self._highlight, self._color,
                    self._context_lines,
                ))

        if self._confirm is not None:
            if not self._confirm("Apply these changes?"):
                logger.info("[Edit] User declined %d edit(s) for %s",
                            len(edit_set), request.file_path)
                result.aborted = True
                return result

        updated = merge_edits(lines, edit_set)
        new_content = join_lines(updated)
        fileio.write_text(request.file_path, new_content)

        result.applied = True
        result.edits_applied = len(edit_set)
        result.line_count_after = len(updated)
        result.content = new_content
        logger.info("[Edit] Applied %d edit(s) to %s (%d → %d lines)",
                    result.edits_applied, request.file_path,
                    result.line_count_before, result.line_count_after)
        self._write(f"Successfully updated file {request.file_path}")
        return result

    def _write(self, text: str) -> None:
        if self._output is not None:
            self._output.write(text + "\n")


def apply_edits(
    request: FileEditRequest,
    confirm: Optional[ConfirmFn] = None,
    preview: bool = False,
    highlight: bool = False,
    output: Optional[TextIO] = None,
) -> EditResult:
    """Convenience wrapper around :class:`EditApplier`."""
    applier = EditApplier(confirm=confirm, preview=preview,
                          highlight=highlight, output=output)
    return applier.apply(request)
