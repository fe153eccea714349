"""Apply report models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from doot.sync.models import Change


class ApplyStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"  # nothing to do (the change was SAME)
    FAILED = "failed"


@dataclass(frozen=True)
class ApplyOutcome:
    change: Change
    status: ApplyStatus
    error: Optional[str] = None

    @property
    def relative_path(self) -> str:
        return self.change.relative_path


@dataclass
class ApplyReport:
    """Per-path outcome of one apply run, in the order the changes were given."""

    outcomes: List[ApplyOutcome] = field(default_factory=list)

    def record(self, outcome: ApplyOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def applied(self) -> List[ApplyOutcome]:
        return [o for o in self.outcomes if o.status == ApplyStatus.APPLIED]

    @property
    def failed(self) -> List[ApplyOutcome]:
        return [o for o in self.outcomes if o.status == ApplyStatus.FAILED]

    @property
    def skipped(self) -> List[ApplyOutcome]:
        return [o for o in self.outcomes if o.status == ApplyStatus.SKIPPED]

    @property
    def has_failures(self) -> bool:
        return any(o.status == ApplyStatus.FAILED for o in self.outcomes)
