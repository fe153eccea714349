"""Ignore rule model: one compiled gitignore pattern."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# Group pathspec sets when a pattern matched below the named path rather
# than the path itself. Those matches are left to the ancestor check.
_DESCENDANT_GROUP = "ps_d"


@dataclass(frozen=True)
class IgnoreRule:
    """A single compiled line from a ``.dootignore`` file.

    ``pattern`` keeps the source text so the rule stays printable; matching
    goes through ``regex``, which pathspec builds once per line.
    """

    pattern: str
    regex: re.Pattern[str] = field(repr=False, compare=False)
    negated: bool = False
    directory_only: bool = False
    anchored: bool = False
    line_no: int = 0

    def applies_to(self, path: str, is_directory: bool) -> bool:
        """True if this rule's glob matches *path* (verdict is up to the caller)."""
        if self.directory_only and not is_directory:
            return False
        match = self.regex.match(path)
        if match is None:
            return False
        return match.groupdict().get(_DESCENDANT_GROUP) is None
