"""Materializers: the two ways a source file is put in place.

Both expose ``materialize(source, destination)`` and raise ApplyError on
failure, so the executor's loop does not care which mode is active.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import Protocol

from doot.config.schema import Mode

_TMP_SUFFIX = ".doot-tmp"


class ApplyError(Exception):
    """Raised when one change cannot be applied."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


def _reason(exc: OSError) -> str:
    if exc.strerror and exc.filename:
        return f"{exc.strerror}: {exc.filename}"
    return exc.strerror or str(exc)


def _prepare_destination(destination: Path) -> None:
    """Create parent folders and remove a real directory sitting at *destination*."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    if destination.is_dir() and not destination.is_symlink():
        shutil.rmtree(destination)


class Materializer(Protocol):
    mode: Mode

    def materialize(self, source: Path, destination: Path) -> None:
        ...


class CopyMaterializer:
    """Copy content and permission bits; the destination is swapped in atomically."""

    mode = Mode.COPY

    def materialize(self, source: Path, destination: Path) -> None:
        try:
            _prepare_destination(destination)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{destination.name}.", suffix=_TMP_SUFFIX, dir=destination.parent
            )
        except OSError as exc:
            raise ApplyError(destination, _reason(exc)) from exc

        try:
            with os.fdopen(fd, "wb") as out, open(source, "rb") as src:
                shutil.copyfileobj(src, out)
                out.flush()
                os.fsync(out.fileno())
            shutil.copymode(source, tmp_name)
            os.replace(tmp_name, destination)
        except OSError as exc:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise ApplyError(destination, _reason(exc)) from exc


class LinkMaterializer:
    """Replace whatever is at the destination with a symlink to the source."""

    mode = Mode.LINK

    def materialize(self, source: Path, destination: Path) -> None:
        target = Path(os.path.abspath(source))
        try:
            _prepare_destination(destination)
            if destination.is_symlink() or destination.exists():
                destination.unlink()
            os.symlink(target, destination)
        except OSError as exc:
            raise ApplyError(destination, _reason(exc)) from exc


def materializer_for(mode: Mode) -> Materializer:
    if mode == Mode.LINK:
        return LinkMaterializer()
    return CopyMaterializer()
