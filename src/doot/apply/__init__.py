"""Applying changes: materializers, executor, report."""

from doot.apply.executor import apply_changes
from doot.apply.materializers import (
    ApplyError,
    CopyMaterializer,
    LinkMaterializer,
    Materializer,
    materializer_for,
)
from doot.apply.models import ApplyOutcome, ApplyReport, ApplyStatus

__all__ = [
    "ApplyError",
    "ApplyOutcome",
    "ApplyReport",
    "ApplyStatus",
    "CopyMaterializer",
    "LinkMaterializer",
    "Materializer",
    "apply_changes",
    "materializer_for",
]
