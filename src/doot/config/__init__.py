"""Configuration loading, schema, defaults, and path resolution."""

from doot.config.loader import CONFIG_FILENAME, load_config, parse_config
from doot.config.resolver import PathResolutionError, resolve_path
from doot.config.schema import ConfigError, DootConfig, Mode

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DootConfig",
    "Mode",
    "PathResolutionError",
    "load_config",
    "parse_config",
    "resolve_path",
]
