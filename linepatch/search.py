"""
Concurrent line search over a directory tree.

A producer thread walks the tree and feeds file paths into a bounded work
queue; a fixed pool of worker threads scans each file line by line and
pushes matches onto a results queue; a coordinator thread closes the
results queue once every worker is done.  Results come back as an
unordered list.
"""

from __future__ import annotations

import logging
import os
import queue
import re
import threading
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from .errors import SearchPatternError
from .fileio import BINARY_SNIFF_BYTES, is_binary

logger = logging.getLogger(__name__)

Matcher = Callable[[str], bool]

# Closes a queue: one per worker on the work queue, one on the results queue.
_DONE = object()


@dataclass
class SearchOptions:
    """How a query is matched.  ``use_regex`` wins over ``match_whole_word``."""
    match_case: bool = False
    match_whole_word: bool = False
    use_regex: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "SearchOptions":
        return cls(
            match_case=bool(data.get("match_case", False)),
            match_whole_word=bool(data.get("match_whole_word", False)),
            use_regex=bool(data.get("use_regex", False)),
        )


@dataclass
class SearchResult:
    """A single matching line."""
    file_path: str
    file_name: str
    line_number: int
    line_content: str

    def to_dict(self) -> dict:
        return asdict(self)


def compile_matcher(query: str, options: Optional[SearchOptions] = None) -> Matcher:
    """Build the line predicate for *query*.

    Raises :class:`SearchPatternError` if a regex query does not compile.
    """
    options = options or SearchOptions()

    if options.use_regex or options.match_whole_word:
        if options.use_regex:
            pattern = query
        else:
            pattern = r"\b" + re.escape(query) + r"\b"
        if not options.match_case:
            pattern = "(?i)" + pattern
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise SearchPatternError(
                f"invalid regular expression {query!r}: {exc}", pattern=query,
            ) from exc
        return lambda line: compiled.search(line) is not None

    if options.match_case:
        return lambda line: query in line

    lowered = query.lower()
    return lambda line: lowered in line.lower()


def scan_file(path: str, matcher: Matcher) -> list[SearchResult]:
    """Return every line of *path* accepted by *matcher*.

    Lines are split on ``\\n`` only; one trailing ``\\r`` is dropped.
    """
    results: list[SearchResult] = []
    file_name = os.path.basename(path)
    with open(path, "rb") as f:
        for line_number, raw in enumerate(f, start=1):
            if raw.endswith(b"\n"):
                raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
            line = raw.decode("utf-8", errors="replace")
            if matcher(line):
                results.append(SearchResult(path, file_name, line_number, line))
    return results


def _produce(root: str, files: queue.Queue, worker_count: int,
             cancel: threading.Event) -> None:
    """Walk *root* depth-first and enqueue file paths, then close *files*."""
    try:
        if not os.path.isdir(root):
            files.put(root)
            return
        # os.walk ignores unreadable directories (onerror=None)
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for name in sorted(filenames):
                if cancel.is_set():
                    return
                files.put(os.path.join(dirpath, name))
    finally:
        for _ in range(worker_count):
            files.put(_DONE)


def _work(files: queue.Queue, results: queue.Queue, matcher: Matcher,
          cancel: threading.Event, sniff_bytes: int) -> None:
    while True:
        path = files.get()
        if path is _DONE:
            return
        if cancel.is_set():
            continue
        # A failing file must not stop this worker from draining the queue
        try:
            if is_binary(path, sniff_bytes):
                continue
            matches = scan_file(path, matcher)
        except Exception as exc:
            logger.debug("[Search] Skipping %s: %s", path, exc)
            continue
        for match in matches:
            results.put(match)


def _coordinate(workers: list[threading.Thread], results: queue.Queue) -> None:
    for worker in workers:
        worker.join()
    results.put(_DONE)


def default_worker_count() -> int:
    return os.cpu_count() or 1


def search(
    root_path: str,
    query: str,
    options: Optional[SearchOptions] = None,
    workers: Optional[int] = None,
    queue_size: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
    sniff_bytes: int = BINARY_SNIFF_BYTES,
) -> list[SearchResult]:
    """Search every text file under *root_path* for lines matching *query*.

    Parameters
    ----------
    options:
        Match mode; defaults to case-insensitive substring search.
    workers:
        Size of the worker pool; defaults to the CPU count.  A fresh pool is
        started for every call.
    queue_size:
        Bound of the work queue; defaults to four paths per worker.
    cancel:
        Optional event.  Once set, no further files are queued or scanned
        and the results gathered so far are returned.

    Raises
    ------
    SearchPatternError
        The query is an invalid regex; no file has been opened.
    FileNotFoundError
        *root_path* does not exist.
    """
    matcher = compile_matcher(query, options)
    if not os.path.exists(root_path):
        raise FileNotFoundError(f"search root does not exist: {root_path}")

    worker_count = max(1, workers or default_worker_count())
    files: queue.Queue = queue.Queue(maxsize=queue_size or worker_count * 4)
    results: queue.Queue = queue.Queue()
    cancel = cancel or threading.Event()

    pool = [
        threading.Thread(
            target=_work,
            args=(files, results, matcher, cancel, sniff_bytes),
            name=f"linepatch-search-{i}",
            daemon=True,
        )
        for i in range(worker_count)
    ]
    for worker in pool:
        worker.start()

    producer = threading.Thread(
        target=_produce, args=(root_path, files, worker_count, cancel),
        name="linepatch-search-walk", daemon=True,
    )
    producer.start()

    coordinator = threading.Thread(
        target=_coordinate, args=(pool, results),
        name="linepatch-search-join", daemon=True,
    )
    coordinator.start()

    collected: list[SearchResult] = []
    while True:
        item = results.get()
        if item is _DONE:
            break
        collected.append(item)

    producer.join()
    logger.info("[Search] %r under %s: %d match(es) with %d worker(s)",
                query, root_path, len(collected), worker_count)
    return collected
