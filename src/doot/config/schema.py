"""Configuration schema: dataclasses for doot.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

SUPPORTED_VERSION = "v1"


class ConfigError(Exception):
    """Raised when config is malformed, unreadable, or a lookup fails."""


class Mode(str, Enum):
    COPY = "copy"
    LINK = "link"

    @classmethod
    def parse(cls, value: str) -> "Mode":
        """Accept ``file`` as an alias of ``copy``. Raises ValueError."""
        value = value.strip().lower()
        if value == "file":
            return cls.COPY
        return cls(value)


@dataclass
class DootConfig:
    version: str = SUPPORTED_VERSION
    mode: Mode = Mode.COPY
    plans: Dict[str, Optional[List[str]]] = field(default_factory=dict)  # None = all groups
    groups: Dict[str, Dict[str, str]] = field(default_factory=dict)  # group -> tag -> expression
    root: Path = field(default_factory=Path.cwd)  # directory holding the group folders
    default_resolver: Optional[str] = None

    def get_group(self, name: str) -> Dict[str, str]:
        try:
            return self.groups[name]
        except KeyError:
            raise ConfigError(f"Group '{name}' not found") from None

    def get_resolver(self, group: str, resolver: str) -> str:
        resolvers = self.get_group(group)
        try:
            return resolvers[resolver]
        except KeyError:
            raise ConfigError(
                f"Resolver '{resolver}' not found in group '{group}'"
            ) from None

    def get_plan_groups(self, plan: str) -> List[str]:
        """Group names of *plan*; an empty plan means every group."""
        if plan not in self.plans:
            raise ConfigError(f"Plan '{plan}' not found")
        groups = self.plans[plan]
        if not groups:
            return sorted(self.groups)
        for name in groups:
            if name not in self.groups:
                raise ConfigError(f"Plan '{plan}' refers to unknown group '{name}'")
        return list(groups)

    def group_dir(self, name: str) -> Path:
        return self.root / name
