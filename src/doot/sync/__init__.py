"""Sync planning: change classification, plans, status."""

from doot.sync.classifier import classify
from doot.sync.models import Change, ChangeKind, Direction, GroupPlan, Plan
from doot.sync.planner import build_group_plan, build_plan, resolve_targets
from doot.sync.status import SyncStatus, check_all, check_group, check_plan

__all__ = [
    "Change",
    "ChangeKind",
    "Direction",
    "GroupPlan",
    "Plan",
    "SyncStatus",
    "build_group_plan",
    "build_plan",
    "check_all",
    "check_group",
    "check_plan",
    "classify",
    "resolve_targets",
]
