"""Text diffing: Myers line differ and hunk models."""

from doot.diff.differ import decode_text, diff, diff_change, diff_lines, split_lines
from doot.diff.models import BinaryDiff, DiffHunk, DiffLine, DiffOp

__all__ = [
    "BinaryDiff",
    "DiffHunk",
    "DiffLine",
    "DiffOp",
    "decode_text",
    "diff",
    "diff_change",
    "diff_lines",
    "split_lines",
]
