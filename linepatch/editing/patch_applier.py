"""
Patch applier — applies a JSON line-number → content map to text, either
overwriting lines in place (replacing) or inserting them with renumbering
(adding).
"""

from __future__ import annotations

import enum
import json
import logging

from .. import fileio
from ..errors import PatchParseError
from .edit_set import EditSet, merge_edits
from .lines import from_line_map, join_lines, parse_line_key, split_lines, to_line_map

logger = logging.getLogger(__name__)


class PatchType(str, enum.Enum):
    REPLACING = "replacing"
    ADDING = "adding"


def decode_patch(patch_json: str) -> dict[str, str]:
    """Decode *patch_json* into a line map, or raise PatchParseError."""
    try:
        patch = json.loads(patch_json)
    except (TypeError, ValueError) as exc:
        raise PatchParseError(f"malformed patch JSON: {exc}") from exc

    if not isinstance(patch, dict):
        raise PatchParseError(
            f"patch must be a JSON object, got {type(patch).__name__}"
        )
    for key, value in patch.items():
        if not isinstance(value, str):
            raise PatchParseError(
                f"patch value for line {key!r} must be a string",
                line_number=parse_line_key(key),
            )
    return patch


def apply_replacing(content: str, patch: dict[str, str]) -> str:
    """Overwrite (or extend) the keyed lines of *content*."""
    line_map = to_line_map(content)
    line_map.update(patch)
    return from_line_map(line_map)


def apply_adding(content: str, patch: dict[str, str]) -> str:
    """Insert each entry so it ends up at its keyed output line.

    Original lines shift down.  A key beyond the end is preceded by one
    blank line per missing position.
    """
    entries: dict[int, str] = {}
    for key, value in patch.items():
        position = parse_line_key(key)
        if position is None:
            raise PatchParseError(f"patch key {key!r} is not a line number")
        if position < 1:
            raise PatchParseError(
                f"patch key {key!r} must be a positive line number",
                line_number=position,
            )
        if position in entries:
            raise PatchParseError(
                f"patch key {key!r} repeats line {position}",
                line_number=position,
            )
        entries[position] = value

    lines = split_lines(content)
    merged = merge_edits(lines, EditSet.from_line_patch(entries), fill_gaps=True)
    return join_lines(merged)


def apply_patch(
    content: str,
    patch_json: str,
    patch_type: PatchType = PatchType.REPLACING,
) -> str:
    """Apply *patch_json* to *content* and return the new content.

    Malformed patches raise :class:`PatchParseError` and produce nothing.
    """
    patch = decode_patch(patch_json)
    if PatchType(patch_type) is PatchType.ADDING:
        return apply_adding(content, patch)
    return apply_replacing(content, patch)


def apply_patch_to_file(
    file_path: str,
    patch_json: str,
    patch_type: PatchType = PatchType.REPLACING,
) -> str:
    """Read *file_path*, apply the patch and write it back atomically.

    The file is only written once the whole patch has been applied in
    memory.  Returns the new content.
    """
    original = fileio.read_text(file_path)
    updated = apply_patch(original, patch_json, patch_type)
    fileio.write_text(file_path, updated)
    logger.info(
        "[Patch] Applied %s patch to %s (%d → %d lines)",
        PatchType(patch_type).value, file_path,
        len(split_lines(original)), len(split_lines(updated)),
    )
    return updated
