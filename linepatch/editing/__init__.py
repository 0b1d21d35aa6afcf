"""Line-addressed file editing — patch maps, structured edits and previews."""

from .lines import to_line_map, from_line_map, split_lines, join_lines
from .edit_set import EditAction, EditInstruction, EditSet, merge_edits, validate_edits
from .patch_applier import (
    PatchType, apply_patch, apply_patch_to_file, apply_adding, apply_replacing,
)
from .preview import EditWindow, compute_edit_window, render_edit_window
from .edit_workflow import (
    EditApplier, EditResult, FileEditRequest, apply_edits, load_edit_request,
)

__all__ = [
    "to_line_map", "from_line_map", "split_lines", "join_lines",
    "EditAction", "EditInstruction", "EditSet", "merge_edits", "validate_edits",
    "PatchType", "apply_patch", "apply_patch_to_file", "apply_adding", "apply_replacing",
    "EditWindow", "compute_edit_window", "render_edit_window",
    "EditApplier", "EditResult", "FileEditRequest", "apply_edits", "load_edit_request",
]
