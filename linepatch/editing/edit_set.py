"""
Edit sets — the single internal representation behind both the JSON line
patch ("adding" semantics) and structured replace/insert requests.

Every edit is addressed by the ORIGINAL line it lands in front of (insert) or
overwrites (replace).  :func:`merge_edits` walks one cursor over the original
lines, so edits at distinct original positions never disturb each other.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from ..errors import EditValidationError
from .lines import split_lines


class EditAction(str, enum.Enum):
    REPLACE = "replace"
    INSERT = "insert"

    @classmethod
    def parse(cls, value: "str | EditAction", file_path: Optional[str] = None,
              line_number: Optional[int] = None) -> "EditAction":
        """Return the action named by *value* or raise EditValidationError."""
        if isinstance(value, EditAction):
            return value
        try:
            return cls(value)
        except ValueError:
            raise EditValidationError(
                f"invalid action {value!r} for file {file_path}",
                file_path=file_path, line_number=line_number,
                action=str(value),
            ) from None


@dataclass
class EditInstruction:
    """One structured edit: replace or insert at a 1-based line number."""
    action: EditAction
    line_number: int
    new_content: str = ""

    def __post_init__(self) -> None:
        self.action = EditAction.parse(self.action, line_number=self.line_number)

    @property
    def new_lines(self) -> list[str]:
        return split_lines(self.new_content)

    @classmethod
    def from_dict(cls, data: dict, file_path: Optional[str] = None) -> "EditInstruction":
        if not isinstance(data, dict):
            raise EditValidationError(
                f"edit must be an object, got {type(data).__name__}",
                file_path=file_path,
            )
        line_number = data.get("line_number")
        if isinstance(line_number, bool) or not isinstance(line_number, int):
            raise EditValidationError(
                f"line_number must be an integer, got {line_number!r}",
                file_path=file_path,
            )
        new_content = data.get("new_content", "")
        if not isinstance(new_content, str):
            raise EditValidationError(
                f"new_content must be a string at line {line_number}",
                file_path=file_path, line_number=line_number,
            )
        action = EditAction.parse(data.get("action", ""), file_path, line_number)
        return cls(action=action, line_number=line_number, new_content=new_content)

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "line_number": self.line_number,
            "new_content": self.new_content,
        }


@dataclass
class EditSet:
    """Edits stable-sorted ascending by line number."""
    edits: list[EditInstruction] = field(default_factory=list)

    @classmethod
    def from_instructions(cls, edits: Iterable[EditInstruction]) -> "EditSet":
        # sorted() is stable: equal line numbers keep their request order
        return cls(sorted(edits, key=lambda e: e.line_number))

    @classmethod
    def from_line_patch(cls, entries: dict[int, str]) -> "EditSet":
        """Lower an adding patch (output position → content) into inserts.

        The i-th entry in position order lands in front of original line
        ``position - i``, which puts it at output line ``position``.
        """
        edits = [
            EditInstruction(EditAction.INSERT, position - i, content)
            for i, (position, content) in enumerate(sorted(entries.items()))
        ]
        return cls(edits)

    def __iter__(self) -> Iterator[EditInstruction]:
        return iter(self.edits)

    def __len__(self) -> int:
        return len(self.edits)


def validate_edits(
    edits: Iterable[EditInstruction],
    line_count: int,
    file_path: Optional[str] = None,
) -> None:
    """Reject the first edit addressed outside the file.

    Inserts may target ``line_count + 1`` (append); replaces may not.
    """
    for edit in edits:
        upper = line_count + 1 if edit.action is EditAction.INSERT else line_count
        if edit.line_number < 1 or edit.line_number > upper:
            raise EditValidationError(
                f"invalid line number {edit.line_number} for {edit.action.value} "
                f"in file {file_path} (file has {line_count} lines)",
                file_path=file_path,
                line_number=edit.line_number,
                action=edit.action.value,
            )


def merge_edits(
    lines: list[str],
    edit_set: EditSet,
    fill_gaps: bool = False,
) -> list[str]:
    """Merge *edit_set* into *lines* with one forward cursor.

    A replace consumes one original line, an insert consumes none.  Edits
    past the end are appended in order; with *fill_gaps* every missing
    position before such an edit becomes a blank line.
    """
    merged: list[str] = []
    cursor = 0
    total = len(lines)

    for edit in edit_set:
        target = edit.line_number - 1
        while cursor < target:
            if cursor < total:
                merged.append(lines[cursor])
            elif fill_gaps:
                merged.append("")
            else:
                break
            cursor += 1

        merged.extend(edit.new_lines)
        if edit.action is EditAction.REPLACE and cursor < total:
            cursor += 1

    merged.extend(lines[cursor:])
    return merged
