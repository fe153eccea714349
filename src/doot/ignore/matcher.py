"""Gitignore-style matcher for ``.dootignore`` files.

Each line is compiled with pathspec's gitwildmatch pattern, so globbing,
anchoring, ``**`` and character classes behave as in git. On top of that:

  - Blank lines and lines starting with ``#`` are skipped; ``\\#`` escapes a
    literal leading hash. A `` #`` after a pattern starts an inline comment.
  - ``!pattern`` re-includes a path excluded by an earlier rule.
  - A trailing ``/`` restricts the rule to directories.

Rules are evaluated in file order and the last matching rule wins. Once a
directory is excluded nothing below it can be re-included.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from pathspec.patterns import GitWildMatchPattern

from doot.ignore.models import IgnoreRule

logger = logging.getLogger(__name__)

IGNORE_FILENAME = ".dootignore"

# Trailing whitespace is dropped unless escaped with a backslash.
_TRAILING_WS = re.compile(r"(?<!\\)\s+\Z")

# Leading whitespace is part of the name in git; pathspec would strip it.
_LEADING_WS = re.compile(r"\A[ \t]+")


class PatternError(Exception):
    """Raised when an ignore pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str, line_no: int = 0) -> None:
        self.pattern = pattern
        self.reason = reason
        self.line_no = line_no
        where = f" (line {line_no})" if line_no else ""
        super().__init__(f"Invalid pattern '{pattern}'{where}: {reason}")


def _check_syntax(body: str, pattern: str) -> None:
    """Reject lines pathspec would silently read as literals."""
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\":
            if i + 1 >= len(body):
                raise PatternError(pattern, "trailing backslash")
            i += 2
            continue
        if c == "[":
            j = i + 1
            if j < len(body) and body[j] in "!^":
                j += 1
            # A ']' right after the opening bracket is a member, not the end.
            if j < len(body) and body[j] == "]":
                j += 1
            while j < len(body) and body[j] != "]":
                j += 2 if body[j] == "\\" else 1
            if j >= len(body):
                raise PatternError(pattern, "unterminated character class")
            i = j
        i += 1


def _strip_comment(line: str) -> str:
    comment = line.find(" #")
    return line[:comment].rstrip() if comment != -1 else line


def parse_rule(raw: str, line_no: int = 0) -> Optional[IgnoreRule]:
    """Compile one line. Returns None for blank and comment lines."""
    line = _TRAILING_WS.sub("", raw)
    if not line.strip() or line.startswith("#"):
        return None

    line = _strip_comment(line)
    source = line
    negated = line.startswith("!")
    if negated:
        line = line[1:]

    directory_only = line.endswith("/") and not line.endswith("\\/")
    if directory_only:
        line = line[:-1]

    if not line.strip("/"):
        return None
    # A slash anywhere but the end anchors the pattern, as in gitignore.
    anchored = "/" in line

    _check_syntax(line, source)
    body = _LEADING_WS.sub(lambda m: "".join("\\" + c for c in m.group()), line)
    try:
        compiled = GitWildMatchPattern(body)
    except (ValueError, re.error) as exc:
        raise PatternError(source, str(exc), line_no) from exc
    if compiled.regex is None:
        return None

    return IgnoreRule(
        pattern=source,
        regex=compiled.regex,
        negated=negated,
        directory_only=directory_only,
        anchored=anchored,
        line_no=line_no,
    )


def normalise_path(path: str) -> str:
    """Slash-normalise a relative path (no leading ``./`` or ``/``)."""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    while path.startswith("./"):
        path = path[2:]
    return path.strip("/")


class IgnoreMatcher:
    """An ordered, immutable set of ignore rules.

    Usage::

        matcher = compile_rules(["*", "!.bashrc"])
        matcher.matches(".vimrc")           # True  -> ignored
        matcher.matches(".bashrc")          # False -> kept
    """

    def __init__(self, rules: Sequence[IgnoreRule] = ()) -> None:
        self._rules: Tuple[IgnoreRule, ...] = tuple(rules)

    @property
    def rules(self) -> Tuple[IgnoreRule, ...]:
        return self._rules

    def extend(self, lines: Iterable[str]) -> "IgnoreMatcher":
        """Return a new matcher with *lines* appended after the current rules."""
        extra = compile_rules(lines, first_line=len(self._rules) + 1)
        return IgnoreMatcher(self._rules + extra.rules)

    def matches(self, path: str, is_directory: bool = False) -> bool:
        """Return True if *path* is ignored.

        Every ancestor directory is checked first: an excluded parent makes
        the path ignored no matter what later negations say.
        """
        path = normalise_path(path)
        if not path:
            return False
        parts = path.split("/")
        for depth in range(1, len(parts)):
            if self._verdict("/".join(parts[:depth]), True):
                return True
        return self._verdict(path, is_directory)

    def is_included(self, path: str, is_directory: bool = False) -> bool:
        return not self.matches(path, is_directory)

    def _verdict(self, path: str, is_directory: bool) -> bool:
        # Fold over the rules in declaration order; the last match wins.
        ignored = False
        for rule in self._rules:
            if rule.applies_to(path, is_directory):
                ignored = not rule.negated
        return ignored

    def __repr__(self) -> str:
        return f"IgnoreMatcher({[r.pattern for r in self._rules]!r})"


def compile_rules(lines: Iterable[str], *, first_line: int = 1) -> IgnoreMatcher:
    """Compile pattern lines into an IgnoreMatcher. Raises PatternError."""
    rules: List[IgnoreRule] = []
    for line_no, raw in enumerate(lines, first_line):
        try:
            rule = parse_rule(raw, line_no)
        except PatternError as exc:
            if exc.line_no:
                raise
            raise PatternError(exc.pattern, exc.reason, line_no) from exc
        if rule is not None:
            rules.append(rule)
    return IgnoreMatcher(rules)


def load_ignore_file(path: Path) -> IgnoreMatcher:
    """Load a ``.dootignore`` file. A missing file yields an empty matcher."""
    if not path.is_file():
        return IgnoreMatcher()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PatternError(str(path), f"cannot read ignore file: {exc}") from exc
    matcher = compile_rules(text.splitlines())
    logger.debug("Loaded %d ignore rule(s) from %s", len(matcher.rules), path)
    return matcher
