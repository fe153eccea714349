"""Tree scanning: walker, probe, entry models."""

from doot.tree.models import EntryKind, FileEntry, Fingerprint
from doot.tree.walker import WalkError, probe, walk

__all__ = [
    "EntryKind",
    "FileEntry",
    "Fingerprint",
    "WalkError",
    "probe",
    "walk",
]
