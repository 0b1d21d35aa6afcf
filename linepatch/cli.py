"""
CLI entry point — argument parsing and dispatch to the edit, patch, search,
tree and suggest commands.
"""

import argparse
import io
import json
import logging
import sys

from .agent import Suggestion, apply_suggestion
from .cli_display import setup_logger
from .config import Config
from .diff_display import (
    compute_file_diff, console_confirm, format_colored_diff, textual_confirm,
)
from .editing import EditApplier, PatchType, apply_patch_to_file, load_edit_request
from .errors import LinePatchError
from .project_scanner import build_directory_tree, count_files, format_tree, tree_to_json
from .search import SearchOptions, search

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_ABORTED = 2


def _read_arg(value: str) -> str:
    """``@path`` reads the argument from a file, ``-`` from stdin."""
    if value == "-":
        return sys.stdin.read()
    if value.startswith("@"):
        with open(value[1:], "r", encoding="utf-8") as f:
            return f.read()
    return value


def _build_confirm(args, cfg: Config, preview_buffer: io.StringIO | None):
    if args.yes or not cfg.CONFIRM:
        return None
    if args.tui:
        return textual_confirm(
            preview_buffer.getvalue if preview_buffer is not None else "")
    return console_confirm


def cmd_edit(args, cfg: Config) -> int:
    request = load_edit_request(_read_arg(args.request))
    buffer = io.StringIO() if args.tui else None
    applier = EditApplier(
        confirm=_build_confirm(args, cfg, buffer),
        preview=cfg.PREVIEW and not args.no_preview,
        highlight=args.highlight or cfg.HIGHLIGHT,
        context_lines=cfg.CONTEXT_LINES,
        output=buffer if buffer is not None else sys.stdout,
    )
    result = applier.apply(request)
    if result.aborted:
        print("user aborted the file edit operation", file=sys.stderr)
        return EXIT_ABORTED
    if buffer is not None and result.applied:
        print(f"Successfully updated file {request.file_path}")
    return EXIT_OK


def cmd_patch(args, cfg: Config) -> int:
    apply_patch_to_file(args.file, _read_arg(args.patch), PatchType(args.mode))
    print(f"Patched {args.file} ({args.mode})")
    return EXIT_OK


def cmd_search(args, cfg: Config) -> int:
    options = SearchOptions(
        match_case=args.match_case,
        match_whole_word=args.whole_word,
        use_regex=args.regex,
    )
    results = search(
        args.root, args.query, options,
        workers=args.workers or cfg.SEARCH_WORKERS or None,
        queue_size=cfg.SEARCH_QUEUE_SIZE or None,
        sniff_bytes=cfg.BINARY_SNIFF_BYTES,
    )
    # Worker order is arbitrary; sort for stable output.
    results.sort(key=lambda r: (r.file_path, r.line_number))
    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        for r in results:
            print(f"{r.file_path}:{r.line_number}: {r.line_content}")
    return EXIT_OK


def cmd_tree(args, cfg: Config) -> int:
    exclude = args.exclude if args.exclude else cfg.TREE_EXCLUDE
    tree = build_directory_tree(args.path, args.include or [], exclude)
    if tree is None:
        logger.info("[Tree] Nothing under %s matched the filters", args.path)
        return EXIT_OK
    logger.info("[Tree] %d file(s) under %s", count_files(tree), args.path)
    if args.minified:
        print(tree_to_json(tree))
    elif args.json:
        print(tree_to_json(tree, pretty=True))
    else:
        print(format_tree(tree))
    return EXIT_OK


def cmd_suggest(args, cfg: Config) -> int:
    with open(args.new_content, "r", encoding="utf-8") as f:
        new_content = f.read()

    colored = format_colored_diff(compute_file_diff(args.file, new_content) or "")

    confirm = None
    if not args.yes and cfg.CONFIRM:
        if args.tui:
            confirm = textual_confirm(colored, title="Whole-file change")
        else:
            def confirm(question: str) -> bool:
                print(colored)
                return console_confirm(question)

    result = apply_suggestion(
        Suggestion(file_path=args.file, new_content=new_content), confirm=confirm)
    if result.aborted:
        print("user aborted the file edit operation", file=sys.stderr)
        return EXIT_ABORTED
    print(f"{'Updated' if result.applied else 'Unchanged'}: {args.file}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linepatch",
        description="Line-addressed file edits and concurrent text search",
    )
    parser.add_argument("--config", default=None,
                        help="Path to .linepatch.yaml config file")
    parser.add_argument("--log-dir", default=None,
                        help="Directory for log files (default: from config)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_edit = sub.add_parser("edit", help="Apply a structured edit request")
    p_edit.add_argument("request",
                        help="Edit request JSON, @file, or - for stdin")
    p_edit.add_argument("--no-preview", action="store_true",
                        help="Do not print the per-edit preview")
    p_edit.add_argument("--yes", "-y", action="store_true",
                        help="Apply without asking for confirmation")
    p_edit.add_argument("--highlight", action="store_true",
                        help="Highlight changed lines with background colours")
    p_edit.add_argument("--tui", action="store_true",
                        help="Review the preview in an interactive viewer")
    p_edit.set_defaults(func=cmd_edit)

    p_patch = sub.add_parser("patch", help="Apply a JSON line patch to a file")
    p_patch.add_argument("file")
    p_patch.add_argument("patch", help='Patch JSON such as \'{"2": "text"}\', @file, or -')
    p_patch.add_argument("--mode", choices=[t.value for t in PatchType],
                         default=PatchType.REPLACING.value,
                         help="replacing overwrites lines, adding inserts them")
    p_patch.set_defaults(func=cmd_patch)

    p_search = sub.add_parser("search", help="Search files for matching lines")
    p_search.add_argument("root")
    p_search.add_argument("query")
    p_search.add_argument("--match-case", action="store_true")
    p_search.add_argument("--whole-word", action="store_true")
    p_search.add_argument("--regex", action="store_true")
    p_search.add_argument("--workers", type=int, default=None,
                          help="Worker threads (default: CPU count)")
    p_search.add_argument("--json", action="store_true",
                          help="Print results as JSON")
    p_search.set_defaults(func=cmd_search)

    p_tree = sub.add_parser("tree", help="Print a directory tree")
    p_tree.add_argument("path", nargs="?", default=".")
    p_tree.add_argument("--include", action="append", default=None,
                        help="Glob for file names to keep (repeatable)")
    p_tree.add_argument("--exclude", action="append", default=None,
                        help="Glob for names to drop (repeatable)")
    p_tree.add_argument("--json", action="store_true", help="Pretty JSON output")
    p_tree.add_argument("--minified", action="store_true", help="Minified JSON output")
    p_tree.set_defaults(func=cmd_tree)

    p_suggest = sub.add_parser("suggest", help="Replace a file's whole content")
    p_suggest.add_argument("file")
    p_suggest.add_argument("new_content", help="File holding the proposed content")
    p_suggest.add_argument("--yes", "-y", action="store_true")
    p_suggest.add_argument("--tui", action="store_true")
    p_suggest.set_defaults(func=cmd_suggest)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = Config.load(args.config)
    setup_logger(args.log_dir or cfg.LOG_DIR)

    try:
        return args.func(args, cfg)
    except (LinePatchError, OSError) as exc:
        logger.error("[CLI] %s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
