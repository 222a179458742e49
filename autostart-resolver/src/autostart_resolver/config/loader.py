from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft202012Validator

from autostart_resolver.catalog.targets import (
    BUILTIN_CATALOG,
    CatalogError,
    TargetCatalog,
)


class ConfigError(RuntimeError):
    pass


_COMPONENT_PATTERN = r"^[A-Za-z0-9_.]+/[A-Za-z0-9_.$]+$"

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "adb_path": {"type": "string", "minLength": 1},
        "serial": {"type": ["string", "null"]},
        "package": {"type": ["string", "null"]},
        "timeout_s": {"type": "number", "exclusiveMinimum": 0},
        "catalog": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "extra": {
                    "type": "object",
                    "additionalProperties": {"type": "string", "pattern": _COMPONENT_PATTERN},
                },
            },
        },
    },
}

ENV_ADB_PATH = "AUTOSTART_ADB_PATH"
ENV_SERIAL = "AUTOSTART_ANDROID_SERIAL"
ENV_PACKAGE = "AUTOSTART_PACKAGE"
ENV_TIMEOUT_S = "AUTOSTART_TIMEOUT_S"
ENV_CONFIG = "AUTOSTART_CONFIG"


@dataclass(frozen=True)
class ResolverConfig:
    adb_path: str = "adb"
    serial: Optional[str] = None
    package: Optional[str] = None
    timeout_s: float = 10.0
    catalog_extra: Dict[str, str] = field(default_factory=dict)

    def build_catalog(self) -> TargetCatalog:
        if not self.catalog_extra:
            return BUILTIN_CATALOG
        try:
            return BUILTIN_CATALOG.with_overrides(self.catalog_extra)
        except CatalogError as e:
            raise ConfigError(f"catalog.extra: {e}") from e


def load_yaml_or_json(path: Path) -> Dict[str, Any]:
    """Load a YAML/JSON file into a dict.

    This is intentionally strict: the top-level must be an object.
    """
    if not path.exists():
        raise FileNotFoundError(path)

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        elif path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            raise ConfigError(f"Unsupported config file extension: {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"{path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level config must be an object: {path}")
    return data


def validate_config(instance: Mapping[str, Any], *, where: str) -> None:
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        msgs = []
        for e in errors[:20]:
            loc = "/".join([str(p) for p in e.path])
            msgs.append(f"- {where}:{loc}: {e.message}")
        if len(errors) > 20:
            msgs.append(f"... ({len(errors)-20} more)")
        raise ConfigError("\n".join(msgs))


def _parse_timeout(raw: str, *, where: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{where}: not a number: {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{where}: must be > 0: {raw!r}")
    return value


def clean_package(raw: Optional[str]) -> Optional[str]:
    """Strip a package name; blank values count as unset."""
    if raw is None:
        return None
    return str(raw).strip() or None


def load_config(
    path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolverConfig:
    """Build the effective config: environment over file over defaults."""

    env = os.environ if environ is None else environ
    if path is None and env.get(ENV_CONFIG):
        path = Path(env[ENV_CONFIG])

    data: Dict[str, Any] = {}
    if path is not None:
        data = load_yaml_or_json(path)
        validate_config(data, where=str(path))

    catalog_cfg = data.get("catalog") or {}
    timeout_s = float(data.get("timeout_s", ResolverConfig.timeout_s))
    if env.get(ENV_TIMEOUT_S):
        timeout_s = _parse_timeout(env[ENV_TIMEOUT_S], where=ENV_TIMEOUT_S)

    cfg = ResolverConfig(
        adb_path=env.get(ENV_ADB_PATH) or data.get("adb_path") or "adb",
        serial=env.get(ENV_SERIAL) or data.get("serial"),
        package=clean_package(env.get(ENV_PACKAGE)) or clean_package(data.get("package")),
        timeout_s=timeout_s,
        catalog_extra=dict(catalog_cfg.get("extra") or {}),
    )
    # Fail early on bad extra entries rather than at first resolve.
    cfg.build_catalog()
    return cfg
