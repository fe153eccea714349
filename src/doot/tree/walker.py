"""Tree walker: lists the files under a root, filtered by ignore rules.

Entries come out in lexicographic order of their relative path, so plans and
previews are stable between runs. Read errors are reported through an
``errors`` list (and the log) instead of stopping the walk.
"""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple

from doot.ignore.matcher import IgnoreMatcher
from doot.tree.models import EntryKind, FileEntry, Fingerprint

logger = logging.getLogger(__name__)


class WalkError(Exception):
    """An entry that could not be read while scanning a tree."""

    def __init__(self, path: Path, error: OSError) -> None:
        self.path = path
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(f"{path}: {reason}")


def _report(errors: Optional[List[WalkError]], path: Path, exc: OSError) -> None:
    err = WalkError(path, exc)
    logger.warning("Cannot read %s", err)
    if errors is not None:
        errors.append(err)


def walk(
    root: Path,
    ignore: Optional[IgnoreMatcher] = None,
    *,
    errors: Optional[List[WalkError]] = None,
) -> Iterator[FileEntry]:
    """Yield a FileEntry for every file and file symlink under *root*.

    Directories (and symlinks to directories) are descended into unless
    ignored; a directory symlink that points back at one of its own
    ancestors is skipped. Dangling symlinks and unreadable entries are
    appended to *errors*.
    """
    ignore = ignore if ignore is not None else IgnoreMatcher()
    root = Path(root).absolute()
    if not root.is_dir():
        missing = FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(root))
        _report(errors, root, missing)
        return
    ancestors = frozenset({os.path.realpath(root)})
    yield from _walk_dir(root, "", ignore, errors, ancestors)


def _walk_dir(
    directory: Path,
    rel_dir: str,
    ignore: IgnoreMatcher,
    errors: Optional[List[WalkError]],
    ancestors: FrozenSet[str],
) -> Iterator[FileEntry]:
    try:
        with os.scandir(directory) as it:
            listing = list(it)
    except OSError as exc:
        _report(errors, directory, exc)
        return

    # Sort directories as "name/" so the whole walk comes out in
    # lexicographic order of relative paths ("a.txt" < "a/b").
    children: List[Tuple[str, os.DirEntry, str, bool, bool]] = []
    for entry in listing:
        rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
        try:
            is_link = entry.is_symlink()
            is_dir = entry.is_dir()
        except OSError as exc:
            _report(errors, Path(entry.path), exc)
            continue
        key = entry.name + "/" if is_dir else entry.name
        children.append((key, entry, rel, is_link, is_dir))
    children.sort(key=lambda child: child[0])

    for _, entry, rel, is_link, is_dir in children:
        if ignore.matches(rel, is_dir):
            continue
        path = Path(entry.path)

        if is_dir:
            real = os.path.realpath(path)
            if real in ancestors:
                logger.info("Skipping %s: symlink loops back to %s", path, real)
                continue
            yield from _walk_dir(path, rel, ignore, errors, ancestors | {real})
            continue

        if not is_link and not entry.is_file():
            logger.debug("Skipping special file %s", path)
            continue

        try:
            fingerprint = Fingerprint.of_file(path)
        except OSError as exc:
            _report(errors, path, exc)
            continue

        yield FileEntry(
            relative_path=rel,
            path=path,
            kind=EntryKind.SYMLINK if is_link else EntryKind.FILE,
            fingerprint=fingerprint,
        )


def probe(
    root: Path,
    relative_paths: Iterable[str],
    *,
    errors: Optional[List[WalkError]] = None,
) -> Iterator[FileEntry]:
    """Yield entries for the given relative paths that exist under *root*.

    Used on the destination side, where only the paths present in the
    source tree matter. Unlike ``walk`` this reports directories (so a
    file/directory clash can be flagged) and dangling symlinks (with no
    fingerprint). Paths are yielded in the order given.
    """
    root = Path(root).absolute()
    for rel in relative_paths:
        path = root / rel
        try:
            is_link = path.is_symlink()
            exists = is_link or path.exists()
        except OSError as exc:
            _report(errors, path, exc)
            continue
        if not exists:
            continue

        if not is_link and path.is_dir():
            yield FileEntry(relative_path=rel, path=path, kind=EntryKind.DIRECTORY)
            continue

        kind = EntryKind.SYMLINK if is_link else EntryKind.FILE
        fingerprint: Optional[Fingerprint] = None
        if path.is_file():
            try:
                fingerprint = Fingerprint.of_file(path)
            except OSError as exc:
                _report(errors, path, exc)
        yield FileEntry(relative_path=rel, path=path, kind=kind, fingerprint=fingerprint)
