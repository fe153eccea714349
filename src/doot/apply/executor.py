"""Apply executor: runs an accepted batch of changes to completion.

Each change is applied on its own: a failure is recorded in the report and
the loop moves on. Nothing is rolled back; the unit of atomicity is one file.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from doot.apply.materializers import ApplyError, Materializer, materializer_for
from doot.apply.models import ApplyOutcome, ApplyReport, ApplyStatus
from doot.config.schema import Mode
from doot.sync.models import Change

logger = logging.getLogger(__name__)


def apply_changes(
    changes: Iterable[Change],
    mode: Mode,
    *,
    materializer: Optional[Materializer] = None,
) -> ApplyReport:
    """Apply every change in order and report a per-path outcome."""
    materializer = materializer or materializer_for(mode)
    report = ApplyReport()

    for change in changes:
        if not change.is_pending:
            report.record(ApplyOutcome(change=change, status=ApplyStatus.SKIPPED))
            continue

        try:
            materializer.materialize(change.source_path, change.destination_path)
        except ApplyError as exc:
            logger.warning("Failed to %s %s: %s", change.kind.value, change.relative_path, exc.reason)
            report.record(ApplyOutcome(change=change, status=ApplyStatus.FAILED, error=exc.reason))
            continue

        logger.debug(
            "%s %s -> %s (%s)",
            change.kind.value,
            change.source_path,
            change.destination_path,
            materializer.mode.value,
        )
        report.record(ApplyOutcome(change=change, status=ApplyStatus.APPLIED))

    return report
