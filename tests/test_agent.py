"""Tests for whole-file suggestions."""

from unittest.mock import MagicMock

from linepatch.agent import Suggestion, apply_suggestion


class TestApplySuggestion:
    def test_writes_new_content(self, tmp_path):
        path = tmp_path / "f.txt"
        path.write_text("line1\nline2\n", encoding="utf-8")
        result = apply_suggestion(Suggestion(str(path), "line1\nchanged\n"))
        assert result.applied is True
        assert result.content == "line1\nchanged\n"
        assert path.read_text(encoding="utf-8") == "line1\nchanged\n"
        assert result.delta.startswith("=6\t")
        assert "+changed" in result.diff

    def test_unchanged_skips_write_and_confirm(self, tmp_path):
        path = tmp_path / "f.txt"
        path.write_text("same", encoding="utf-8")
        confirm = MagicMock(return_value=True)
        result = apply_suggestion(Suggestion(str(path), "same"), confirm=confirm)
        assert result.applied is False
        assert result.diff is None
        confirm.assert_not_called()

    def test_declined(self, tmp_path):
        path = tmp_path / "f.txt"
        path.write_text("old", encoding="utf-8")
        confirm = MagicMock(return_value=False)
        result = apply_suggestion(Suggestion(str(path), "new"), confirm=confirm)
        assert result.aborted is True
        assert path.read_text(encoding="utf-8") == "old"
        assert "f.txt" in confirm.call_args[0][0]
