"""Tests for directory tree construction and printing."""

import json
import os

import pytest

from linepatch.project_scanner import (
    DirectoryTree, build_directory_tree, count_files, format_tree, tree_to_json,
    working_directory_tree,
)


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "proj"
    root.mkdir()
    (root / "file1.txt").write_text("file1")
    (root / "data.bin").write_bytes(b"\x00\x01")
    sub = root / "subdir"
    sub.mkdir()
    (sub / "file2.txt").write_text("file2!")
    (sub / "script.py").write_text("print()")
    (root / "empty").mkdir()
    return root


class TestBuildDirectoryTree:
    def test_structure_and_sizes(self, project):
        tree = build_directory_tree(str(project))
        assert tree.name == "proj"
        assert tree.is_file is False
        assert [c.name for c in tree.children] == ["data.bin", "empty", "file1.txt", "subdir"]
        assert tree.size == 2 + 5 + 6 + 7
        subdir = tree.children[3]
        assert subdir.size == 13
        assert tree.children[0].is_binary is True
        assert tree.children[2].is_binary is False

    def test_empty_dir_kept_without_include(self, project):
        tree = build_directory_tree(str(project))
        empty = tree.children[1]
        assert empty.children == []
        assert empty.size == 0

    def test_include_prunes_dirs_without_matches(self, project):
        tree = build_directory_tree(str(project), include=["*.txt"])
        assert [c.name for c in tree.children] == ["file1.txt", "subdir"]
        assert [c.name for c in tree.children[1].children] == ["file2.txt"]

    def test_include_without_matches_prunes_root(self, project):
        assert build_directory_tree(str(project), include=["*.md"]) is None

    def test_exclude_directory(self, project):
        tree = build_directory_tree(str(project), exclude=["subdir"])
        assert "subdir" not in [c.name for c in tree.children]

    def test_exclude_files(self, project):
        tree = build_directory_tree(str(project), exclude=["*.bin", "empty"])
        assert [c.name for c in tree.children] == ["file1.txt", "subdir"]

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            build_directory_tree(str(tmp_path / "missing"))

    def test_working_directory(self, project, monkeypatch):
        monkeypatch.chdir(project)
        tree = working_directory_tree(exclude=["subdir"])
        assert tree.name == "proj"
        assert count_files(tree) == 2


class TestFormatTree:
    def test_connectors(self):
        tree = DirectoryTree(path="root", name="root", children=[
            DirectoryTree(path="root/file1.txt", name="file1.txt", is_file=True),
            DirectoryTree(path="root/subdir", name="subdir", children=[
                DirectoryTree(path="root/subdir/file2.txt", name="file2.txt", is_file=True),
            ]),
        ])
        assert format_tree(tree) == "├── file1.txt\n└── subdir\n    └── file2.txt"

    def test_nested_prefix(self):
        tree = DirectoryTree(path="r", name="r", children=[
            DirectoryTree(path="r/a", name="a", children=[
                DirectoryTree(path="r/a/x", name="x", is_file=True),
            ]),
            DirectoryTree(path="r/b", name="b", is_file=True),
        ])
        assert format_tree(tree) == "├── a\n│   └── x\n└── b"


class TestTreeJson:
    def test_optional_fields_omitted(self):
        tree = DirectoryTree(path="root", name="root", children=[
            DirectoryTree(path="root/f", name="f", is_file=True, size=3),
        ], size=3)
        assert tree_to_json(tree) == (
            '{"path":"root","name":"root","is_file":false,'
            '"children":[{"path":"root/f","name":"f","is_file":true,"size":3}],"size":3}'
        )

    def test_binary_flag_present_when_set(self):
        tree = DirectoryTree(path="b", name="b", is_file=True, is_binary=True)
        assert json.loads(tree_to_json(tree))["is_binary"] is True

    def test_pretty_is_same_document(self, project):
        tree = build_directory_tree(str(project))
        pretty = tree_to_json(tree, pretty=True)
        assert "\n  " in pretty
        assert json.loads(pretty) == json.loads(tree_to_json(tree))

    def test_undecodable_names_are_escaped(self):
        name = os.fsdecode(b"bad\xffname")
        tree = DirectoryTree(path=name, name=name, is_file=True)
        encoded = tree_to_json(tree)
        assert encoded.isascii()
        assert "\\udcff" in encoded
