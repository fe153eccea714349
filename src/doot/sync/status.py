"""Status checker: how far each group and plan is from the repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from doot.config.resolver import PathResolutionError, resolve_path
from doot.config.schema import DootConfig
from doot.sync.models import Change, ChangeKind, Direction
from doot.sync.planner import build_group_plan


class SyncStatus(str, Enum):
    IN_SYNC = "in-sync"
    OUT_OF_SYNC = "out-of-sync"
    NEW = "new"
    SKIPPED = "skipped"


@dataclass
class GroupStatusResult:
    name: str
    status: SyncStatus
    changes: List[Change] = field(default_factory=list)
    error: Optional[str] = None
    warnings: int = 0


@dataclass
class PlanStatusResult:
    name: str
    status: SyncStatus


def _fold_group(changes: List[Change]) -> SyncStatus:
    if not changes:
        return SyncStatus.NEW
    pending = [c for c in changes if c.is_pending]
    if not pending:
        return SyncStatus.IN_SYNC
    if len(pending) == len(changes) and all(c.kind == ChangeKind.CREATE for c in pending):
        return SyncStatus.NEW
    return SyncStatus.OUT_OF_SYNC


def check_group(config: DootConfig, name: str, resolver: str) -> GroupStatusResult:
    """Compare the group folder against its target, as an export would."""
    expression = config.get_group(name).get(resolver)
    if expression is None:
        return GroupStatusResult(name=name, status=SyncStatus.SKIPPED)

    try:
        target = resolve_path(expression)
    except PathResolutionError as exc:
        return GroupStatusResult(name=name, status=SyncStatus.SKIPPED, error=str(exc))

    group_dir = config.group_dir(name)
    if not group_dir.is_dir():
        return GroupStatusResult(name=name, status=SyncStatus.NEW)

    group = build_group_plan(name, Direction.EXPORT, group_dir, target)
    if group.error:
        return GroupStatusResult(name=name, status=SyncStatus.SKIPPED, error=group.error)

    return GroupStatusResult(
        name=name,
        status=_fold_group(group.changes),
        changes=group.changes,
        warnings=len(group.warnings),
    )


def check_plan(
    config: DootConfig,
    plan_name: str,
    group_results: List[GroupStatusResult],
) -> PlanStatusResult:
    """Fold the status of a plan's groups: out-of-sync beats new beats in-sync."""
    members = config.plans.get(plan_name)
    names = sorted(config.groups) if not members else members
    by_name: Dict[str, GroupStatusResult] = {g.name: g for g in group_results}

    seen = [by_name[n].status for n in names if n in by_name]
    seen = [s for s in seen if s != SyncStatus.SKIPPED]

    if not seen:
        status = SyncStatus.SKIPPED
    elif SyncStatus.OUT_OF_SYNC in seen:
        status = SyncStatus.OUT_OF_SYNC
    elif SyncStatus.NEW in seen:
        status = SyncStatus.NEW
    else:
        status = SyncStatus.IN_SYNC
    return PlanStatusResult(name=plan_name, status=status)


def check_all(
    config: DootConfig, resolver: str
) -> Tuple[List[GroupStatusResult], List[PlanStatusResult]]:
    groups = [check_group(config, name, resolver) for name in sorted(config.groups)]
    plans = [check_plan(config, name, groups) for name in sorted(config.plans)]
    return groups, plans
