"""
Whole-file suggestions — an agent proposes a file's complete new content;
the change is reduced to a delta against the current file, optionally
reviewed, then applied and written atomically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from . import fileio
from .diff_display import apply_delta, compute_diff, generate_delta

logger = logging.getLogger(__name__)


@dataclass
class Suggestion:
    """A proposed replacement for the whole content of ``file_path``."""
    file_path: str
    new_content: str


@dataclass
class SuggestionResult:
    file_path: str
    applied: bool = False
    aborted: bool = False
    delta: str = ""
    diff: Optional[str] = None
    content: str = ""


def apply_suggestion(
    suggestion: Suggestion,
    confirm: Optional[Callable[[str], bool]] = None,
) -> SuggestionResult:
    """Apply *suggestion* to disk and return the outcome.

    When *confirm* is given it is asked before writing; a negative answer
    leaves the file untouched and marks the result as aborted.
    """
    original = fileio.read_text(suggestion.file_path)
    delta = generate_delta(original, suggestion.new_content)
    new_content = apply_delta(original, delta)

    result = SuggestionResult(
        file_path=suggestion.file_path,
        delta=delta,
        diff=compute_diff(original, new_content, suggestion.file_path),
        content=new_content,
    )

    if result.diff is None:
        logger.info("[Suggest] %s unchanged, nothing to write", suggestion.file_path)
        return result

    if confirm is not None and not confirm(f"Apply changes to {suggestion.file_path}?"):
        logger.info("[Suggest] User declined changes to %s", suggestion.file_path)
        result.aborted = True
        return result

    fileio.write_text(suggestion.file_path, new_content)
    result.applied = True
    logger.info("[Suggest] Wrote %s (%d delta ops)",
                suggestion.file_path, len(delta.split("\t")) if delta else 0)
    return result
