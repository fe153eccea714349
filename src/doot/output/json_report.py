"""JSON reporter for scripts and CI."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from doot.sync.status import GroupStatusResult, PlanStatusResult


def status_to_dict(
    resolver: str,
    groups: Sequence[GroupStatusResult],
    plans: Sequence[PlanStatusResult],
) -> Dict[str, Any]:
    """Convert status results to a JSON-serialisable dict."""
    groups_list: List[Dict[str, Any]] = []
    for g in groups:
        groups_list.append({
            "name": g.name,
            "status": g.status.value,
            "pending": [c.relative_path for c in g.changes if c.is_pending],
            "warnings": g.warnings,
            **({"error": g.error} if g.error else {}),
        })

    return {
        "version": "1.0",
        "resolver": resolver,
        "groups": groups_list,
        "plans": [{"name": p.name, "status": p.status.value} for p in plans],
    }


def render_status(
    resolver: str,
    groups: Sequence[GroupStatusResult],
    plans: Sequence[PlanStatusResult],
) -> str:
    """Return formatted JSON string."""
    return json.dumps(status_to_dict(resolver, groups, plans), indent=2)
