"""Resolver expressions: ``~``, ``$VAR`` and ``${VAR}`` expansion to absolute paths."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping, Optional

_VAR_RE = re.compile(r"\$(?:\{(?P<braced>[^}]*)\}|(?P<name>[A-Za-z_][A-Za-z0-9_]*))")


class PathResolutionError(Exception):
    """Raised when a resolver expression cannot be expanded."""


def expand(expression: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Expand a leading ``~`` and every ``$VAR`` / ``${VAR}`` in *expression*.

    Unlike ``os.path.expandvars`` an unset variable is an error, never left
    in place.
    """
    env = os.environ if environ is None else environ
    text = expression.strip()

    if text.startswith("~"):
        head, sep, tail = text.partition("/")
        if head == "~":
            home = env.get("HOME") or os.path.expanduser("~")
        else:
            home = os.path.expanduser(head)
        if home.startswith("~"):
            raise PathResolutionError(f"Cannot expand '{head}' in '{expression}'")
        text = home + sep + tail

    def _substitute(m: re.Match[str]) -> str:
        name = m.group("braced") if m.group("braced") is not None else m.group("name")
        if not name:
            raise PathResolutionError(f"Empty variable reference in '{expression}'")
        value = env.get(name)
        if value is None:
            raise PathResolutionError(
                f"Environment variable '{name}' is not set (in '{expression}')"
            )
        return value

    return _VAR_RE.sub(_substitute, text)


def resolve_path(expression: str, environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the absolute path for a resolver expression."""
    expanded = expand(expression, environ)
    if not expanded:
        raise PathResolutionError(f"Resolver expression '{expression}' is empty")
    return Path(expanded).absolute()
