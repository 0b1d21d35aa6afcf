"""Tests for the concurrent line search engine."""

import threading

import pytest

from linepatch.errors import SearchPatternError
from linepatch.search import (
    SearchOptions, SearchResult, compile_matcher, scan_file, search,
)


@pytest.fixture
def search_root(tmp_path):
    (tmp_path / "file1.txt").write_text(
        "hello world\nline two has another hello", encoding="utf-8")
    (tmp_path / "file2.txt").write_text("HELLO\nthis is a test", encoding="utf-8")
    (tmp_path / "file4.txt").write_text("this is helloworld", encoding="utf-8")
    sub = tmp_path / "subdir"
    sub.mkdir()
    (sub / "file3.txt").write_text("another hello for the test", encoding="utf-8")
    (tmp_path / "binary.bin").write_bytes(b"\x00\x01\x02\x03hello")
    return tmp_path


def _keys(results):
    return sorted((r.file_name, r.line_number) for r in results)


class TestCompileMatcher:
    def test_plain_case_insensitive(self):
        match = compile_matcher("hello", SearchOptions())
        assert match("say HeLLo")
        assert not match("goodbye")

    def test_plain_case_sensitive(self):
        match = compile_matcher("hello", SearchOptions(match_case=True))
        assert match("hello world")
        assert not match("HELLO")

    def test_whole_word(self):
        match = compile_matcher("hello", SearchOptions(match_whole_word=True))
        assert match("hello world")
        assert match("HELLO there")
        assert not match("helloworld")

    def test_whole_word_escapes_query(self):
        match = compile_matcher("a.b", SearchOptions(match_whole_word=True))
        assert match("x a.b y")
        assert not match("x acb y")

    def test_regex(self):
        match = compile_matcher(r"h.llo\s+w", SearchOptions(use_regex=True))
        assert match("HALLO world")
        match_cs = compile_matcher(r"h.llo", SearchOptions(use_regex=True, match_case=True))
        assert not match_cs("HELLO")

    def test_regex_wins_over_whole_word(self):
        options = SearchOptions(use_regex=True, match_whole_word=True)
        match = compile_matcher("hel+o", options)
        assert match("helloworld")

    def test_invalid_regex(self):
        with pytest.raises(SearchPatternError) as exc_info:
            compile_matcher("[unclosed", SearchOptions(use_regex=True))
        assert exc_info.value.pattern == "[unclosed"


class TestSearch:
    def test_case_insensitive_substring(self, search_root):
        results = search(str(search_root), "hello", SearchOptions())
        assert _keys(results) == [
            ("file1.txt", 1), ("file1.txt", 2), ("file2.txt", 1),
            ("file3.txt", 1), ("file4.txt", 1),
        ]

    def test_case_sensitive_substring(self, search_root):
        results = search(str(search_root), "hello", SearchOptions(match_case=True))
        assert ("file2.txt", 1) not in _keys(results)
        assert ("file1.txt", 1) in _keys(results)

    def test_whole_word(self, search_root):
        results = search(str(search_root), "hello", SearchOptions(match_whole_word=True))
        assert _keys(results) == [
            ("file1.txt", 1), ("file1.txt", 2), ("file2.txt", 1), ("file3.txt", 1),
        ]

    def test_regex(self, search_root):
        results = search(str(search_root), "^hello", SearchOptions(use_regex=True))
        assert _keys(results) == [("file1.txt", 1), ("file2.txt", 1)]

    def test_result_fields(self, search_root):
        results = search(str(search_root), "another hello for",
                         SearchOptions(match_case=True))
        assert len(results) == 1
        result = results[0]
        assert result == SearchResult(
            file_path=str(search_root / "subdir" / "file3.txt"),
            file_name="file3.txt",
            line_number=1,
            line_content="another hello for the test",
        )
        assert result.to_dict()["line_content"] == "another hello for the test"

    def test_binary_files_never_match(self, search_root):
        results = search(str(search_root), "hello")
        assert all(r.file_name != "binary.bin" for r in results)

    def test_nul_after_sniff_window_is_text(self, tmp_path):
        (tmp_path / "late.txt").write_bytes(b"a" * 2000 + b"\x00\nneedle\n")
        results = search(str(tmp_path), "needle")
        assert _keys(results) == [("late.txt", 2)]

    @pytest.mark.parametrize("offset,found", [
        (1023, False),
        (1024, True),
    ])
    def test_nul_at_sniff_window_edge(self, tmp_path, offset, found):
        (tmp_path / "edge.txt").write_bytes(b"a" * offset + b"\x00\nneedle\n")
        results = search(str(tmp_path), "needle")
        assert bool(results) is found

    def test_invalid_regex_returns_no_partial_results(self, search_root):
        with pytest.raises(SearchPatternError):
            search(str(search_root), "(", SearchOptions(use_regex=True))

    def test_missing_root(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            search(str(tmp_path / "missing"), "x")

    def test_root_may_be_a_file(self, search_root):
        results = search(str(search_root / "file2.txt"), "test")
        assert _keys(results) == [("file2.txt", 2)]

    @pytest.mark.parametrize("workers", [1, 2, 8])
    def test_worker_count_does_not_change_results(self, search_root, workers):
        results = search(str(search_root), "hello", workers=workers, queue_size=1)
        assert len(results) == 5

    def test_many_files(self, tmp_path):
        for i in range(60):
            d = tmp_path / f"d{i % 5}"
            d.mkdir(exist_ok=True)
            (d / f"f{i}.txt").write_text(f"x\nmatch {i}\ny\n", encoding="utf-8")
        results = search(str(tmp_path), "match", workers=4)
        assert len(results) == 60
        assert {r.line_number for r in results} == {2}

    def test_unreadable_file_is_skipped(self, search_root, monkeypatch):
        import importlib
        search_mod = importlib.import_module("linepatch.search")

        real_scan = search_mod.scan_file

        def flaky_scan(path, matcher):
            if path.endswith("file2.txt"):
                raise PermissionError("denied")
            return real_scan(path, matcher)

        monkeypatch.setattr(search_mod, "scan_file", flaky_scan)
        results = search(str(search_root), "hello")
        assert all(r.file_name != "file2.txt" for r in results)
        assert len(results) == 4

    def test_unexpected_error_in_every_file_still_finishes(self, tmp_path, monkeypatch):
        import importlib
        search_mod = importlib.import_module("linepatch.search")

        for i in range(20):
            (tmp_path / f"f{i}.txt").write_text("hello\n", encoding="utf-8")

        def broken_scan(path, matcher):
            raise RuntimeError("boom")

        monkeypatch.setattr(search_mod, "scan_file", broken_scan)
        assert search(str(tmp_path), "hello", workers=2, queue_size=1) == []

    def test_cancelled_before_start_returns_nothing(self, search_root):
        cancel = threading.Event()
        cancel.set()
        assert search(str(search_root), "hello", cancel=cancel) == []

    def test_unset_cancel_token_does_not_change_results(self, search_root):
        results = search(str(search_root), "hello", cancel=threading.Event())
        assert len(results) == 5


class TestScanFile:
    def test_crlf_trailing_cr_dropped(self, tmp_path):
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"one\r\ntwo hello\r\n")
        results = scan_file(str(path), compile_matcher("hello"))
        assert [(r.line_number, r.line_content) for r in results] == [(2, "two hello")]

    def test_invalid_utf8_is_replaced(self, tmp_path):
        path = tmp_path / "latin.txt"
        path.write_bytes(b"caf\xe9 hello\n")
        results = scan_file(str(path), compile_matcher("hello"))
        assert len(results) == 1
        assert results[0].line_content.endswith(" hello")


def test_options_from_dict():
    options = SearchOptions.from_dict({"match_case": True, "use_regex": 1})
    assert options == SearchOptions(match_case=True, match_whole_word=False, use_regex=True)
