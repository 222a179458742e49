from __future__ import annotations

from autostart_resolver.config.loader import (
    CONFIG_SCHEMA,
    ConfigError,
    ResolverConfig,
    clean_package,
    load_config,
    load_yaml_or_json,
    validate_config,
)

__all__ = [
    "CONFIG_SCHEMA",
    "ConfigError",
    "ResolverConfig",
    "clean_package",
    "load_config",
    "load_yaml_or_json",
    "validate_config",
]
