"""Change and plan models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from doot.tree.models import FileEntry
from doot.tree.walker import WalkError


class ChangeKind(str, Enum):
    CREATE = "create"
    OVERWRITE = "overwrite"
    SAME = "same"


class Direction(str, Enum):
    IMPORT = "import"  # filesystem -> repository
    EXPORT = "export"  # repository -> filesystem


@dataclass(frozen=True)
class Change:
    """Classified outcome for one relative path.

    ``destination`` is None for creates. ``type_mismatch`` is set when the
    two sides are different kinds of entry (file vs directory, or file vs
    symlink with different content) so the preview can warn about it.
    """

    kind: ChangeKind
    relative_path: str
    source: FileEntry
    destination_path: Path
    destination: Optional[FileEntry] = None
    type_mismatch: bool = False

    @property
    def source_path(self) -> Path:
        return self.source.path

    @property
    def is_pending(self) -> bool:
        return self.kind != ChangeKind.SAME


@dataclass
class GroupPlan:
    """Changes for one group, plus anything that went wrong scanning it."""

    name: str
    source_root: Path
    destination_root: Path
    changes: List[Change] = field(default_factory=list)
    warnings: List[WalkError] = field(default_factory=list)
    error: Optional[str] = None  # set when the group could not be planned at all

    @property
    def has_changes(self) -> bool:
        return any(c.is_pending for c in self.changes)

    def count(self, kind: ChangeKind) -> int:
        return sum(1 for c in self.changes if c.kind == kind)

    def pending_changes(self) -> List[Change]:
        return [c for c in self.changes if c.is_pending]


@dataclass
class Plan:
    """All group plans for one import or export run."""

    operation: str  # e.g. "Export group 'bash'"
    direction: Direction
    groups: List[GroupPlan] = field(default_factory=list)

    def add_group(self, group: GroupPlan) -> None:
        self.groups.append(group)

    @property
    def has_changes(self) -> bool:
        return any(g.has_changes for g in self.groups)

    @property
    def is_empty(self) -> bool:
        return all(not g.changes for g in self.groups)

    @property
    def warnings(self) -> List[WalkError]:
        return [w for g in self.groups for w in g.warnings]

    @property
    def errors(self) -> List[str]:
        return [f"{g.name}: {g.error}" for g in self.groups if g.error]

    def count(self, kind: ChangeKind) -> int:
        return sum(g.count(kind) for g in self.groups)

    def counts(self) -> Dict[str, int]:
        return {kind.value: self.count(kind) for kind in ChangeKind}

    def pending_changes(self) -> List[Change]:
        return [c for g in self.groups for c in g.pending_changes()]
