"""Planner: turns groups and a resolver into a reviewed-before-apply Plan."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from doot.config.resolver import resolve_path
from doot.config.schema import DootConfig
from doot.ignore.matcher import IGNORE_FILENAME, PatternError, load_ignore_file
from doot.sync.classifier import classify
from doot.sync.models import Direction, GroupPlan, Plan
from doot.tree.walker import probe, walk

logger = logging.getLogger(__name__)


def build_group_plan(
    name: str,
    direction: Direction,
    group_dir: Path,
    target_dir: Path,
) -> GroupPlan:
    """Scan one group and classify every in-scope file.

    The ignore rules always come from the group folder in the repository,
    whichever way the sync goes, and the ignore file itself is never synced.
    """
    if direction == Direction.EXPORT:
        source_root, destination_root = group_dir, target_dir
    else:
        source_root, destination_root = target_dir, group_dir

    group = GroupPlan(name=name, source_root=source_root, destination_root=destination_root)

    try:
        matcher = load_ignore_file(group_dir / IGNORE_FILENAME)
        matcher = matcher.extend([f"/{IGNORE_FILENAME}"])
    except PatternError as exc:
        logger.error("Group '%s' skipped: %s", name, exc)
        group.error = str(exc)
        return group

    source = list(walk(source_root, matcher, errors=group.warnings))
    destination = probe(
        destination_root,
        (entry.relative_path for entry in source),
        errors=group.warnings,
    )
    group.changes = classify(source, destination, destination_root=destination_root)

    logger.debug(
        "Group '%s': %d file(s), %d pending", name, len(group.changes), len(group.pending_changes())
    )
    return group


def resolve_targets(config: DootConfig, groups: List[str], resolver: str) -> List[Tuple[str, Path]]:
    """Resolve every group's target directory up front.

    Raises ConfigError or PathResolutionError before anything is scanned.
    """
    targets: List[Tuple[str, Path]] = []
    for name in groups:
        expression = config.get_resolver(name, resolver)
        targets.append((name, resolve_path(expression)))
    return targets


def build_plan(
    config: DootConfig,
    direction: Direction,
    groups: List[str],
    resolver: str,
    operation: str,
) -> Plan:
    plan = Plan(operation=operation, direction=direction)
    for name, target in resolve_targets(config, groups, resolver):
        logger.info("Planning %s of group '%s' against %s", direction.value, name, target)
        plan.add_group(build_group_plan(name, direction, config.group_dir(name), target))
    return plan
