"""
Project scanner — builds a directory tree with sizes and binary flags, and
prints it as an indented tree or as JSON.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .fileio import is_binary

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES = [".git", "node_modules", ".DS_Store", "__pycache__"]


@dataclass
class DirectoryTree:
    """A file or directory node.  A directory's size is the sum of its children."""
    path: str
    name: str
    is_file: bool = False
    is_binary: bool = False
    children: list["DirectoryTree"] = field(default_factory=list)
    size: int = 0

    def to_dict(self) -> dict:
        """JSON-ready dict; ``is_binary`` and ``children`` only when set."""
        data: dict = {"path": self.path, "name": self.name, "is_file": self.is_file}
        if self.is_binary:
            data["is_binary"] = True
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        data["size"] = self.size
        return data


def _matches_any(name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def build_directory_tree(
    path: str,
    include: Optional[list[str]] = None,
    exclude: Optional[list[str]] = None,
) -> Optional[DirectoryTree]:
    """Recursively describe *path*.

    Exclude patterns are matched against base names of files and
    directories; include patterns only against file names.  With include
    patterns, a directory with no surviving children is dropped.  Returns
    None when *path* itself is filtered out.  A missing *path* raises
    ``FileNotFoundError``; unreadable children are logged and skipped.
    """
    include = include or []
    exclude = exclude or []

    st = os.stat(path)
    name = os.path.basename(os.path.normpath(path)) or path

    if _matches_any(name, exclude):
        return None

    if not os.path.isdir(path):
        if include and not _matches_any(name, include):
            return None
        return DirectoryTree(
            path=path, name=name, is_file=True,
            is_binary=is_binary(path), size=st.st_size,
        )

    children: list[DirectoryTree] = []
    for entry in sorted(os.listdir(path)):
        child_path = os.path.join(path, entry)
        try:
            child = build_directory_tree(child_path, include, exclude)
        except OSError as exc:
            logger.warning("[Tree] Error processing %s: %s", child_path, exc)
            continue
        if child is not None:
            children.append(child)

    if not children and include:
        return None

    return DirectoryTree(
        path=path, name=name, is_file=False, children=children,
        size=sum(child.size for child in children),
    )


def working_directory_tree(
    include: Optional[list[str]] = None,
    exclude: Optional[list[str]] = None,
) -> Optional[DirectoryTree]:
    """Tree of the current working directory."""
    return build_directory_tree(os.getcwd(), include, exclude)


def format_tree(tree: DirectoryTree) -> str:
    """Render the children of *tree* with box-drawing connectors."""
    lines: list[str] = []

    def _walk(children: list[DirectoryTree], prefix: str) -> None:
        for i, child in enumerate(children):
            last = i == len(children) - 1
            connector = "└── " if last else "├── "
            lines.append(f"{prefix}{connector}{child.name}")
            if child.children:
                _walk(child.children, prefix + ("    " if last else "│   "))

    _walk(tree.children, "")
    return "\n".join(lines)


def tree_to_json(tree: DirectoryTree, pretty: bool = False) -> str:
    """Serialise *tree*; minified by default, two-space indented if *pretty*."""
    if pretty:
        return json.dumps(tree.to_dict(), indent=2)
    return json.dumps(tree.to_dict(), separators=(",", ":"))


def count_files(tree: DirectoryTree) -> int:
    if tree.is_file:
        return 1
    return sum(count_files(child) for child in tree.children)
