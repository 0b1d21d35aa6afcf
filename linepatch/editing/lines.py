"""
Line addressing — content ⇄ line sequence ⇄ line-number keyed map.

Lines are split strictly on ``\\n``; a ``\\r`` stays part of its line.
"""

from __future__ import annotations

import re

_NUMERIC_KEY = re.compile(r"[+-]?\d+")


def split_lines(content: str) -> list[str]:
    """Split *content* into its 1-based line sequence (always at least one line)."""
    return content.split("\n")


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def parse_line_key(key: str) -> int | None:
    """Return the integer line number for *key*, or None if it is not numeric."""
    if not isinstance(key, str) or not _NUMERIC_KEY.fullmatch(key):
        return None
    return int(key)


def to_line_map(content: str) -> dict[str, str]:
    """Map ``"1".."N"`` to the lines of *content*."""
    return {str(i): line for i, line in enumerate(split_lines(content), start=1)}


def from_line_map(line_map: dict[str, str]) -> str:
    """Rebuild content from *line_map*.

    Keys are ordered numerically; keys that are not integers are dropped.
    """
    numbered: list[tuple[int, str]] = []
    for key, value in line_map.items():
        num = parse_line_key(key)
        if num is None:
            continue
        numbered.append((num, value))
    numbered.sort(key=lambda item: item[0])
    return join_lines([value for _, value in numbered])
