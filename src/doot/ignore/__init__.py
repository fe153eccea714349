"""Ignore rules: gitignore-style pattern compilation and matching."""

from doot.ignore.matcher import (
    IGNORE_FILENAME,
    IgnoreMatcher,
    PatternError,
    compile_rules,
    load_ignore_file,
)
from doot.ignore.models import IgnoreRule

__all__ = [
    "IGNORE_FILENAME",
    "IgnoreMatcher",
    "IgnoreRule",
    "PatternError",
    "compile_rules",
    "load_ignore_file",
]
