"""Load and validate doot.yaml, then apply DOOT_* environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from doot.config.schema import SUPPORTED_VERSION, ConfigError, DootConfig, Mode

CONFIG_FILENAME = "doot.yaml"

__all__ = ["CONFIG_FILENAME", "ConfigError", "find_config_file", "load_config", "parse_config"]


def find_config_file(override: Optional[str] = None, cwd: Optional[Path] = None) -> Path:
    """Locate the config file. *override* takes precedence over ./doot.yaml."""
    cwd = cwd or Path.cwd()
    path = Path(override) if override else cwd / CONFIG_FILENAME
    if not path.is_absolute():
        path = cwd / path
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    return path


def _parse_yaml(text: str, origin: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {origin}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Failed to parse {origin}: top level must be a mapping")
    return data


def _parse_mode(value: Any) -> Mode:
    if value is None:
        return Mode.COPY
    try:
        return Mode.parse(str(value))
    except ValueError:
        raise ConfigError(f"Unknown mode '{value}' (expected file, copy or link)") from None


def _parse_plans(raw: Any) -> Dict[str, Optional[List[str]]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("'plans' must be a mapping of plan name to group list")
    plans: Dict[str, Optional[List[str]]] = {}
    for name, groups in raw.items():
        if groups is None:
            plans[str(name)] = None
        elif isinstance(groups, str):
            plans[str(name)] = [groups]
        elif isinstance(groups, list):
            plans[str(name)] = [str(g) for g in groups]
        else:
            raise ConfigError(f"Plan '{name}' must be a list of group names")
    return plans


def _parse_groups(raw: Any) -> Dict[str, Dict[str, str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("'groups' must be a mapping of group name to resolvers")
    groups: Dict[str, Dict[str, str]] = {}
    for name, resolvers in raw.items():
        if resolvers is None:
            groups[str(name)] = {}
            continue
        if not isinstance(resolvers, dict):
            raise ConfigError(f"Group '{name}' must map resolver names to paths")
        for tag, expr in resolvers.items():
            if not isinstance(expr, str):
                raise ConfigError(f"Resolver '{tag}' in group '{name}' must be a string")
        groups[str(name)] = {str(tag): expr for tag, expr in resolvers.items()}
    return groups


def _merge_env_overrides(cfg: DootConfig) -> None:
    """Apply DOOT_* environment variable overrides."""
    if val := os.environ.get("DOOT_MODE"):
        try:
            cfg.mode = Mode.parse(val)
        except ValueError:
            pass
    if val := os.environ.get("DOOT_RESOLVER"):
        cfg.default_resolver = val.strip() or None


def parse_config(text: str, root: Path, origin: str = CONFIG_FILENAME) -> DootConfig:
    """Build a DootConfig from YAML *text*; group folders live under *root*."""
    raw = _parse_yaml(text, origin)

    version = raw.get("version")
    if version is None:
        raise ConfigError(f"{origin} is missing the 'version' key")
    if str(version) != SUPPORTED_VERSION:
        raise ConfigError(f"Unsupported config version: {version}")

    return DootConfig(
        version=str(version),
        mode=_parse_mode(raw.get("mode")),
        plans=_parse_plans(raw.get("plans")),
        groups=_parse_groups(raw.get("groups")),
        root=root,
    )


def load_config(config_override: Optional[str] = None, cwd: Optional[Path] = None) -> DootConfig:
    """Load, validate, and return a DootConfig."""
    path = find_config_file(config_override, cwd)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    cfg = parse_config(text, path.parent.absolute(), origin=str(path))
    _merge_env_overrides(cfg)
    return cfg
