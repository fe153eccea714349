"""Tests for the apply executor and materializers."""

import os
import stat
from pathlib import Path

import pytest

from conftest import write_tree
from doot.apply import (
    ApplyError,
    ApplyStatus,
    CopyMaterializer,
    LinkMaterializer,
    apply_changes,
)
from doot.config import Mode
from doot.sync import ChangeKind, Direction, build_group_plan


def _plan(src: Path, dst: Path):
    return build_group_plan("g", Direction.EXPORT, src, dst)


class TestCopy:
    def test_creates_files_and_parents(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {".bashrc": "b\n", ".config/app/conf": "c\n"})
        dst = tmp_path / "dst"
        report = apply_changes(_plan(src, dst).pending_changes(), Mode.COPY)
        assert len(report.applied) == 2
        assert (dst / ".bashrc").read_text() == "b\n"
        assert (dst / ".config/app/conf").read_text() == "c\n"

    def test_preserves_permission_bits(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"run.sh": "#!/bin/sh\n"})
        (src / "run.sh").chmod(0o755)
        dst = tmp_path / "dst"
        apply_changes(_plan(src, dst).pending_changes(), Mode.COPY)
        assert stat.S_IMODE((dst / "run.sh").stat().st_mode) == 0o755

    def test_overwrite_leaves_no_temp_files(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"f": "new\n"})
        dst = write_tree(tmp_path / "dst", {"f": "old\n"})
        apply_changes(_plan(src, dst).pending_changes(), Mode.COPY)
        assert (dst / "f").read_text() == "new\n"
        assert sorted(os.listdir(dst)) == ["f"]

    def test_replaces_directory_at_destination(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"conf": "file\n"})
        dst = write_tree(tmp_path / "dst", {"conf/inner": "dir\n"})
        plan = _plan(src, dst)
        assert plan.changes[0].type_mismatch
        report = apply_changes(plan.pending_changes(), Mode.COPY)
        assert not report.has_failures
        assert (dst / "conf").read_text() == "file\n"

    def test_export_is_idempotent(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"a": "1\n", "b/c": "2\n"})
        dst = tmp_path / "dst"
        apply_changes(_plan(src, dst).pending_changes(), Mode.COPY)
        again = _plan(src, dst)
        assert not again.has_changes
        assert all(c.kind == ChangeKind.SAME for c in again.changes)

    def test_same_changes_are_skipped(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"a": "1\n"})
        dst = write_tree(tmp_path / "dst", {"a": "1\n"})
        report = apply_changes(_plan(src, dst).changes, Mode.COPY)
        assert [o.status for o in report.outcomes] == [ApplyStatus.SKIPPED]

    def test_never_deletes_destination_only_files(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"a": "1\n"})
        dst = write_tree(tmp_path / "dst", {"local-only": "keep\n"})
        apply_changes(_plan(src, dst).pending_changes(), Mode.COPY)
        assert (dst / "local-only").read_text() == "keep\n"


class TestLink:
    def test_replaces_file_with_symlink(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {".vimrc": "set nu\n"})
        dst = write_tree(tmp_path / "dst", {".vimrc": "old\n"})
        report = apply_changes(_plan(src, dst).pending_changes(), Mode.LINK)
        assert not report.has_failures
        link = dst / ".vimrc"
        assert link.is_symlink()
        assert Path(os.readlink(link)) == (src / ".vimrc").absolute()
        assert all(c.kind == ChangeKind.SAME for c in _plan(src, dst).changes)

    def test_linked_tree_is_in_sync(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {".vimrc": "set nu\n", "x/y": "z\n"})
        dst = tmp_path / "dst"
        apply_changes(_plan(src, dst).pending_changes(), Mode.LINK)
        again = _plan(src, dst)
        assert [c.kind for c in again.changes] == [ChangeKind.SAME, ChangeKind.SAME]

    def test_relinks_existing_symlink(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"f": "new\n"})
        other = write_tree(tmp_path / "other", {"f": "old\n"})
        dst = tmp_path / "dst"
        dst.mkdir()
        (dst / "f").symlink_to(other / "f")
        LinkMaterializer().materialize(src / "f", dst / "f")
        assert (dst / "f").resolve() == (src / "f").resolve()


class TestFailures:
    def test_parent_is_a_file(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"blocked/f": "x\n"})
        dst = write_tree(tmp_path / "dst", {"blocked": "i am a file\n"})
        with pytest.raises(ApplyError):
            CopyMaterializer().materialize(src / "blocked/f", dst / "blocked/f")

    def test_failure_does_not_stop_the_batch(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"a": "1\n", "blocked/f": "2\n", "z": "3\n"})
        dst = write_tree(tmp_path / "dst", {"blocked": "file\n"})
        report = apply_changes(_plan(src, dst).pending_changes(), Mode.COPY)
        assert [o.relative_path for o in report.applied] == ["a", "z"]
        assert [o.relative_path for o in report.failed] == ["blocked/f"]
        assert report.failed[0].error
        assert report.has_failures
        assert (dst / "z").read_text() == "3\n"

    @pytest.mark.skipif(
        hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores permissions"
    )
    def test_read_only_destination(self, tmp_path: Path):
        src = write_tree(tmp_path / "src", {"f": "x\n"})
        dst = tmp_path / "dst"
        dst.mkdir()
        dst.chmod(0o555)
        try:
            report = apply_changes(_plan(src, dst).pending_changes(), Mode.COPY)
        finally:
            dst.chmod(0o755)
        assert report.has_failures
        assert list(dst.iterdir()) == []
