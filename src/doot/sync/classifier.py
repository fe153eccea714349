"""Change classifier: merge-joins a source and a destination tree."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from doot.sync.models import Change, ChangeKind
from doot.tree.models import FileEntry


def _compare(source: FileEntry, destination: FileEntry, destination_root: Path) -> Change:
    target = destination_root / source.relative_path

    if destination.is_directory:
        return Change(
            kind=ChangeKind.OVERWRITE,
            relative_path=source.relative_path,
            source=source,
            destination_path=target,
            destination=destination,
            type_mismatch=True,
        )

    if source.same_content(destination):
        # A symlink resolving to identical content counts as in sync.
        kind = ChangeKind.SAME
        mismatch = False
    else:
        kind = ChangeKind.OVERWRITE
        mismatch = source.is_symlink != destination.is_symlink

    return Change(
        kind=kind,
        relative_path=source.relative_path,
        source=source,
        destination_path=target,
        destination=destination,
        type_mismatch=mismatch,
    )


def classify(
    source_entries: Iterable[FileEntry],
    destination_entries: Iterable[FileEntry],
    *,
    destination_root: Path,
) -> List[Change]:
    """Pair two path-sorted entry sequences into an ordered list of changes.

    Every source path yields exactly one Change. Paths that exist only in
    the destination are skipped: a sync never deletes.
    """
    destination_root = Path(destination_root)
    changes: List[Change] = []
    dst_iter = iter(destination_entries)
    dst = next(dst_iter, None)

    for src in source_entries:
        while dst is not None and dst.relative_path < src.relative_path:
            dst = next(dst_iter, None)

        if dst is not None and dst.relative_path == src.relative_path:
            changes.append(_compare(src, dst, destination_root))
            dst = next(dst_iter, None)
        else:
            changes.append(
                Change(
                    kind=ChangeKind.CREATE,
                    relative_path=src.relative_path,
                    source=src,
                    destination_path=destination_root / src.relative_path,
                )
            )

    return changes
