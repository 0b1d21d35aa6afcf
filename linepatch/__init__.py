"""linepatch — line-addressed file edits, previews and concurrent search."""

from .errors import (
    LinePatchError, EditValidationError, PatchParseError, SearchPatternError, DeltaError,
)
from .search import SearchOptions, SearchResult, search

__all__ = [
    "LinePatchError", "EditValidationError", "PatchParseError",
    "SearchPatternError", "DeltaError",
    "SearchOptions", "SearchResult", "search",
]

__version__ = "0.1.0"
