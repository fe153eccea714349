"""Line diff between the two sides of a change.

Uses Myers' O(ND) shortest-edit-script algorithm, so no shorter script
exists under exact line equality (trailing whitespace and line endings
included). Input is split on ``\\n`` only and each line keeps its ending,
so joining EQUAL+DELETE lines gives back the destination text and
EQUAL+INSERT lines the source text, byte for byte.
"""

from __future__ import annotations

import itertools
import re
from typing import Dict, List, Optional, Sequence, Tuple, Union

from doot.diff.models import BinaryDiff, DiffHunk, DiffLine, DiffOp
from doot.sync.models import Change

_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")

Edit = Tuple[DiffOp, int, int]  # (op, destination index, source index)
DiffResult = List[Union[DiffHunk, BinaryDiff]]


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` keeping line endings; a final unterminated line is kept as is."""
    return _LINE_RE.findall(text)


def decode_text(data: bytes) -> Optional[str]:
    """Return *data* as text, or None if it looks binary (NUL byte or not UTF-8)."""
    if b"\x00" in data:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _bisect(a: Sequence[int], b: Sequence[int]) -> Optional[Tuple[int, int]]:
    """Find the middle snake of a and b; return where to split them.

    Runs the forward and reverse Myers passes at once, keeping only the
    current ``V`` rows, so memory stays linear in ``len(a) + len(b)``.
    Returns None when the two sides share nothing.
    """
    n, m = len(a), len(b)
    max_d = (n + m + 1) // 2
    offset = max_d
    width = 2 * max_d
    forward = [-1] * width
    forward[offset + 1] = 0
    reverse = forward[:]
    delta = n - m
    front = delta % 2 != 0
    # Diagonals that ran off the edit graph are skipped on later steps.
    k1_start = k1_end = k2_start = k2_end = 0

    for d in range(max_d):
        for k1 in range(-d + k1_start, d + 1 - k1_end, 2):
            i = offset + k1
            if k1 == -d or (k1 != d and forward[i - 1] < forward[i + 1]):
                x1 = forward[i + 1]
            else:
                x1 = forward[i - 1] + 1
            y1 = x1 - k1
            while x1 < n and y1 < m and a[x1] == b[y1]:
                x1 += 1
                y1 += 1
            forward[i] = x1
            if x1 > n:
                k1_end += 2
            elif y1 > m:
                k1_start += 2
            elif front:
                j = offset + delta - k1
                if 0 <= j < width and reverse[j] != -1 and x1 >= n - reverse[j]:
                    return x1, y1

        for k2 in range(-d + k2_start, d + 1 - k2_end, 2):
            j = offset + k2
            if k2 == -d or (k2 != d and reverse[j - 1] < reverse[j + 1]):
                x2 = reverse[j + 1]
            else:
                x2 = reverse[j - 1] + 1
            y2 = x2 - k2
            while x2 < n and y2 < m and a[n - x2 - 1] == b[m - y2 - 1]:
                x2 += 1
                y2 += 1
            reverse[j] = x2
            if x2 > n:
                k2_end += 2
            elif y2 > m:
                k2_start += 2
            elif not front:
                i = offset + delta - k2
                if 0 <= i < width and forward[i] != -1:
                    x1 = forward[i]
                    if x1 >= n - x2:
                        return x1, offset + x1 - i
    return None


def _common_lines(
    a: Sequence[int], b: Sequence[int], a_base: int, b_base: int, out: List[Tuple[int, int]]
) -> None:
    """Append the (a, b) index pairs of one longest common subsequence to *out*."""
    prefix = 0
    limit = min(len(a), len(b))
    while prefix < limit and a[prefix] == b[prefix]:
        out.append((a_base + prefix, b_base + prefix))
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and a[len(a) - 1 - suffix] == b[len(b) - 1 - suffix]:
        suffix += 1

    mid_a = a[prefix:len(a) - suffix]
    mid_b = b[prefix:len(b) - suffix]
    if mid_a and mid_b:
        split = _bisect(mid_a, mid_b)
        if split is not None:
            x, y = split
            _common_lines(mid_a[:x], mid_b[:y], a_base + prefix, b_base + prefix, out)
            _common_lines(mid_a[x:], mid_b[y:], a_base + prefix + x, b_base + prefix + y, out)

    a_tail = a_base + len(a) - suffix
    b_tail = b_base + len(b) - suffix
    out.extend((a_tail + i, b_tail + i) for i in range(suffix))


def edit_script(a: Sequence[str], b: Sequence[str]) -> List[Edit]:
    """Minimal edit script turning *a* (destination) into *b* (source).

    Lines found on only one side can never be part of a common run, so they
    are dropped before the search; on mostly rewritten files that leaves
    little or nothing for the quadratic part to do.
    """
    ids: Dict[str, int] = {}
    a_ids = [ids.setdefault(line, len(ids)) for line in a]
    b_ids = [ids.setdefault(line, len(ids)) for line in b]
    shared = set(a_ids) & set(b_ids)
    a_keep = [i for i, line in enumerate(a_ids) if line in shared]
    b_keep = [j for j, line in enumerate(b_ids) if line in shared]

    pairs: List[Tuple[int, int]] = []
    _common_lines([a_ids[i] for i in a_keep], [b_ids[j] for j in b_keep], 0, 0, pairs)

    edits: List[Edit] = []
    x = y = 0
    for i, j in [(a_keep[p], b_keep[q]) for p, q in pairs] + [(len(a), len(b))]:
        edits.extend((DiffOp.DELETE, k, y) for k in range(x, i))
        edits.extend((DiffOp.INSERT, i, k) for k in range(y, j))
        if i < len(a):
            edits.append((DiffOp.EQUAL, i, j))
        x, y = i + 1, j + 1
    return edits


def diff_lines(source: Sequence[str], destination: Sequence[str]) -> List[DiffHunk]:
    """Diff two line lists and group the result into single-op hunks."""
    lines: List[DiffLine] = []
    for op, i, j in edit_script(destination, source):
        if op == DiffOp.EQUAL:
            lines.append(DiffLine(op, source[j], destination_line=i + 1, source_line=j + 1))
        elif op == DiffOp.DELETE:
            lines.append(DiffLine(op, destination[i], destination_line=i + 1))
        else:
            lines.append(DiffLine(op, source[j], source_line=j + 1))

    return [
        DiffHunk(op=op, lines=tuple(group))
        for op, group in itertools.groupby(lines, key=lambda line: line.op)
    ]


def diff(source: bytes, destination: bytes) -> DiffResult:
    """Diff two buffers. Binary content yields a single BinaryDiff marker."""
    source_text = decode_text(source)
    destination_text = decode_text(destination)
    if source_text is None or destination_text is None:
        return [BinaryDiff(source_size=len(source), destination_size=len(destination))]
    return list(diff_lines(split_lines(source_text), split_lines(destination_text)))


def diff_change(change: Change) -> DiffResult:
    """Read both sides of *change* and diff them. Raises OSError."""
    source = change.source_path.read_bytes()
    destination = b""
    if change.destination is not None and not change.destination.is_directory:
        if change.destination.fingerprint is not None:
            destination = change.destination_path.read_bytes()
    return diff(source, destination)
