"""Tests for the change classifier."""

from pathlib import Path

from doot.sync import ChangeKind, classify
from doot.tree import EntryKind, FileEntry, Fingerprint

SRC = Path("/repo/bash")
DST = Path("/home/user")


def _entry(rel: str, data: bytes = b"x", *, root: Path = SRC, kind: EntryKind = EntryKind.FILE) -> FileEntry:
    fingerprint = None if kind == EntryKind.DIRECTORY else Fingerprint.of_bytes(data)
    return FileEntry(relative_path=rel, path=root / rel, kind=kind, fingerprint=fingerprint)


class TestClassify:
    def test_create_overwrite_same(self):
        source = [_entry("a", b"1"), _entry("b", b"2"), _entry("c", b"3")]
        destination = [_entry("b", b"changed", root=DST), _entry("c", b"3", root=DST)]
        changes = classify(source, destination, destination_root=DST)
        assert [(c.relative_path, c.kind) for c in changes] == [
            ("a", ChangeKind.CREATE),
            ("b", ChangeKind.OVERWRITE),
            ("c", ChangeKind.SAME),
        ]

    def test_one_change_per_source_path_in_order(self):
        source = [_entry(p) for p in ("a", "b/c", "b/d", "e")]
        changes = classify(source, [], destination_root=DST)
        assert [c.relative_path for c in changes] == ["a", "b/c", "b/d", "e"]
        assert all(c.kind == ChangeKind.CREATE for c in changes)

    def test_destination_only_paths_are_ignored(self):
        source = [_entry("b")]
        destination = [_entry("a", root=DST), _entry("b", root=DST), _entry("z", root=DST)]
        changes = classify(source, destination, destination_root=DST)
        assert [c.relative_path for c in changes] == ["b"]

    def test_destination_path_is_under_destination_root(self):
        [change] = classify([_entry("x/y")], [], destination_root=DST)
        assert change.destination_path == DST / "x/y"
        assert change.source_path == SRC / "x/y"
        assert change.destination is None

    def test_empty_source(self):
        assert classify([], [_entry("a", root=DST)], destination_root=DST) == []


class TestTypeMismatch:
    def test_directory_at_destination(self):
        destination = [_entry("conf", root=DST, kind=EntryKind.DIRECTORY)]
        [change] = classify([_entry("conf")], destination, destination_root=DST)
        assert change.kind == ChangeKind.OVERWRITE
        assert change.type_mismatch

    def test_symlink_with_same_content_is_same(self):
        destination = [_entry("f", b"data", root=DST, kind=EntryKind.SYMLINK)]
        [change] = classify([_entry("f", b"data")], destination, destination_root=DST)
        assert change.kind == ChangeKind.SAME
        assert not change.is_pending

    def test_symlink_with_other_content_is_flagged(self):
        destination = [_entry("f", b"old", root=DST, kind=EntryKind.SYMLINK)]
        [change] = classify([_entry("f", b"new")], destination, destination_root=DST)
        assert change.kind == ChangeKind.OVERWRITE
        assert change.type_mismatch

    def test_unreadable_destination_is_overwritten(self):
        dangling = FileEntry(relative_path="f", path=DST / "f", kind=EntryKind.SYMLINK)
        [change] = classify([_entry("f")], [dangling], destination_root=DST)
        assert change.kind == ChangeKind.OVERWRITE
