"""
Diff display — whole-file unified diffs, the compact delta used by the
whole-file replacement path, and the interactive approval prompts.

The Textual viewer pauses execution so the user can review a change and
approve or reject it before anything is written to disk.
"""

from __future__ import annotations

import difflib
import os
from typing import Callable

from diff_match_patch import diff_match_patch
from rich.text import Text

from .cli_display import BOLD, CYAN, GREEN, RED, RESET
from .errors import DeltaError


def compute_diff(old_content: str, new_content: str, filepath: str = "file") -> str | None:
    """Return a unified diff of the two texts, or None if they are equal."""
    if old_content == new_content:
        return None

    diff = difflib.unified_diff(
        old_content.splitlines(keepends=True),
        new_content.splitlines(keepends=True),
        fromfile=f"a/{filepath}",
        tofile=f"b/{filepath}",
        lineterm="",
    )
    diff_text = "\n".join(line.rstrip("\n") for line in diff)
    return diff_text if diff_text.strip() else None


def compute_file_diff(filepath: str, new_content: str) -> str | None:
    """Diff the file on disk against *new_content*; None for new/unchanged files."""
    if not os.path.isfile(filepath):
        return None
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        old_content = f.read()
    return compute_diff(old_content, new_content, filepath)


def format_colored_diff(diff_text: str) -> str:
    """Add ANSI colours to a unified diff string.

    Green for additions (+), red for deletions (-), cyan for @@ hunks.
    """
    colored: list[str] = []
    for line in diff_text.splitlines():
        if line.startswith("+++") or line.startswith("---"):
            colored.append(f"{BOLD}{line}{RESET}")
        elif line.startswith("@@"):
            colored.append(f"{CYAN}{line}{RESET}")
        elif line.startswith("+"):
            colored.append(f"{GREEN}{line}{RESET}")
        elif line.startswith("-"):
            colored.append(f"{RED}{line}{RESET}")
        else:
            colored.append(line)
    return "\n".join(colored)


# ══════════════════════════════════════════════════════════════════
#  Whole-file delta
# ══════════════════════════════════════════════════════════════════

def generate_delta(old_content: str, new_content: str) -> str:
    """Encode the change from *old_content* to *new_content*.

    Uses the diff-match-patch delta format: tab-separated ``=n`` (keep),
    ``-n`` (drop) and ``+text`` (insert URL-quoted text).  Lengths count
    UTF-16 code units, so deltas interoperate with other dmp ports.
    """
    dmp = diff_match_patch()
    return dmp.diff_toDelta(dmp.diff_main(old_content, new_content))


def apply_delta(old_content: str, delta: str) -> str:
    """Rebuild the new text from *old_content* and a delta.

    Raises :class:`DeltaError` if the delta is malformed or does not cover
    *old_content* exactly.
    """
    dmp = diff_match_patch()
    try:
        diffs = dmp.diff_fromDelta(old_content, delta)
    except ValueError as exc:
        raise DeltaError(f"invalid delta: {exc}") from exc
    return dmp.diff_text2(diffs)


# ══════════════════════════════════════════════════════════════════
#  Approval prompts
# ══════════════════════════════════════════════════════════════════

def console_confirm(question: str) -> bool:
    """Ask *question* on stdin; only ``y``/``yes`` count as approval."""
    try:
        response = input(f"\n{question} (y/n): ")
    except (EOFError, KeyboardInterrupt):
        return False
    return response.strip().lower() in ("y", "yes")


def textual_confirm(body: str | Callable[[], str], title: str = "Review changes"
                    ) -> Callable[[str], bool]:
    """Return a confirm capability that shows *body* in a Textual viewer.

    *body* may be a callable so the text can be produced after the
    capability is created (e.g. a preview rendered into a buffer).
    """
    def _confirm(question: str) -> bool:
        text = body() if callable(body) else body
        return run_approval_app(title, text, question)

    return _confirm


def run_approval_app(title: str, body: str, question: str) -> bool:
    """Launch a Textual app showing *body* (ANSI allowed) and wait for A/R."""
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, VerticalScroll
    from textual.widgets import Button, Footer, Static

    class ApprovalApp(App):
        """Scrollable review pane with approve/reject."""

        CSS = """
        #title-bar {
            dock: top;
            height: 3;
            background: #1a1a2e;
            color: #e94560;
            text-align: center;
            padding: 1;
            text-style: bold;
        }
        #review-scroll {
            height: 1fr;
            margin: 1 2;
            border: round #444;
            padding: 1;
        }
        #question {
            dock: bottom;
            height: 1;
            text-align: center;
            color: #888;
        }
        #action-buttons {
            dock: bottom;
            height: 3;
            align: center middle;
        }
        #action-buttons Button {
            margin: 0 2;
            min-width: 20;
        }
        """

        BINDINGS = [
            Binding("a", "approve", "Approve"),
            Binding("y", "approve", "Approve"),
            Binding("escape", "reject", "Reject"),
            Binding("r", "reject", "Reject"),
            Binding("n", "reject", "Reject"),
        ]

        def __init__(self) -> None:
            super().__init__()
            self.approved = False

        def compose(self) -> ComposeResult:
            yield Static(f" ━━  {title}  ━━ ", id="title-bar")
            with VerticalScroll(id="review-scroll"):
                yield Static(Text.from_ansi(body))
            yield Static(
                f"{question}  —  press A to approve, R or Esc to reject",
                id="question",
            )
            with Horizontal(id="action-buttons"):
                yield Button("✔ Approve", id="approve-btn", variant="success")
                yield Button("✕ Reject", id="reject-btn", variant="error")
            yield Footer()

        def on_button_pressed(self, event: Button.Pressed) -> None:
            self.approved = event.button.id == "approve-btn"
            self.exit()

        def action_approve(self) -> None:
            self.approved = True
            self.exit()

        def action_reject(self) -> None:
            self.approved = False
            self.exit()

    app = ApprovalApp()
    app.run()
    return app.approved
