"""
Edit preview — bounded before/after context windows around a structured
edit, rendered with line-number gutters for human review.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..cli_display import (
    GRAY, GREEN, GREEN_BG, LIGHT_BLUE, RED, RED_BG, RESET, WHITE,
)
from .edit_set import EditAction, EditInstruction

DEFAULT_CONTEXT_LINES = 2


@dataclass
class EditWindow:
    """The four windows shown for one edit.

    Each ``*_start`` is the 1-based number printed next to the first line
    of that window.  Top, removed and bottom carry original line numbers;
    added lines count up from the edit's target line.
    """
    top: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    bottom: list[str] = field(default_factory=list)
    top_start: int = 1
    removed_start: int = 1
    added_start: int = 1
    bottom_start: int = 1


def compute_edit_window(
    edit: EditInstruction,
    lines: list[str],
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> EditWindow:
    """Build the preview windows for *edit* against the original *lines*."""
    ln = edit.line_number
    added = edit.new_lines

    # A one-line file is shown whole as context.
    if len(lines) == 1:
        return EditWindow(top=list(lines), added=added, top_start=1,
                          removed_start=ln, added_start=ln, bottom_start=ln)

    top_start = max(1, ln - context_lines)
    top = lines[top_start - 1:ln - 1]

    if edit.action is EditAction.REPLACE:
        removed = lines[ln - 1:ln]
        bottom_start = ln + 1
    else:
        removed = []
        bottom_start = ln
    bottom = lines[bottom_start - 1:bottom_start - 1 + context_lines]

    return EditWindow(
        top=top, removed=removed, added=added, bottom=bottom,
        top_start=top_start, removed_start=ln, added_start=ln,
        bottom_start=bottom_start,
    )


def render_edit_window(
    window: EditWindow,
    highlight: bool = False,
    color: bool = True,
) -> str:
    """Render *window* as gutter-numbered text.

    *highlight* swaps coloured ``-``/``+`` markers for coloured
    backgrounds.  The rendered content is identical in both modes.
    """
    if color:
        gutter, context, reset = LIGHT_BLUE, GRAY, RESET
        if highlight:
            removed_style, added_style = RED_BG + WHITE, GREEN_BG + WHITE
        else:
            removed_style, added_style = RED, GREEN
    else:
        gutter = context = reset = removed_style = added_style = ""

    out: list[str] = []
    for i, line in enumerate(window.top):
        out.append(f"{gutter}{window.top_start + i:3d}| {context}{line}{reset}")
    for i, line in enumerate(window.removed):
        out.append(f"{gutter}{window.removed_start + i:3d}| {removed_style}- {line}{reset}")
    for i, line in enumerate(window.added):
        out.append(f"{gutter}{window.added_start + i:3d}| {added_style}+ {line}{reset}")
    for i, line in enumerate(window.bottom):
        out.append(f"{gutter}{window.bottom_start + i:3d}| {context}{line}{reset}")
    return "\n".join(out)


def render_edit_preview(
    edit: EditInstruction,
    lines: list[str],
    highlight: bool = False,
    color: bool = True,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> str:
    """Header plus rendered window for one edit."""
    window = compute_edit_window(edit, lines, context_lines)
    header = f"Edit at line {edit.line_number} ({edit.action.value}):"
    return header + "\n" + render_edit_window(window, highlight, color)
