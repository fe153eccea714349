"""Diff data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class DiffOp(str, Enum):
    EQUAL = "equal"
    DELETE = "delete"  # only in the destination
    INSERT = "insert"  # only in the source


@dataclass(frozen=True, slots=True)
class DiffLine:
    """One line of a diff.

    Line numbers are 1-based and tracked per side: a deleted line has no
    source number, an inserted line has no destination number.
    """

    op: DiffOp
    text: str  # includes its line ending, if it had one
    destination_line: Optional[int] = None
    source_line: Optional[int] = None


@dataclass(frozen=True)
class DiffHunk:
    """A run of consecutive lines sharing one operation."""

    op: DiffOp
    lines: Tuple[DiffLine, ...]

    @property
    def text(self) -> str:
        return "".join(line.text for line in self.lines)


@dataclass(frozen=True)
class BinaryDiff:
    """Stands in for a line diff when either side is not UTF-8 text."""

    source_size: int
    destination_size: int
