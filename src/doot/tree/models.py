"""Data models for tree walking."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

_CHUNK_SIZE = 65536


class EntryKind(str, Enum):
    FILE = "file"
    SYMLINK = "symlink"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Fingerprint:
    """Content identity of a file: byte size plus SHA-256 of the content."""

    size: int
    digest: str

    @classmethod
    def of_file(cls, path: Path) -> "Fingerprint":
        """Hash *path* (following symlinks). Raises OSError."""
        sha = hashlib.sha256()
        size = 0
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                sha.update(chunk)
                size += len(chunk)
        return cls(size=size, digest=sha.hexdigest())

    @classmethod
    def of_bytes(cls, data: bytes) -> "Fingerprint":
        return cls(size=len(data), digest=hashlib.sha256(data).hexdigest())


@dataclass(frozen=True)
class FileEntry:
    """One entry of a scanned tree.

    ``fingerprint`` is None for directories and for entries whose content
    could not be read (a dangling symlink, an unreadable file); such entries
    never compare equal to anything.
    """

    relative_path: str  # slash-separated, relative to the tree root
    path: Path  # absolute location on disk
    kind: EntryKind = EntryKind.FILE
    fingerprint: Optional[Fingerprint] = None

    @property
    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind == EntryKind.SYMLINK

    def same_content(self, other: "FileEntry") -> bool:
        if self.fingerprint is None or other.fingerprint is None:
            return False
        return self.fingerprint == other.fingerprint
