from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from autostart_resolver.catalog.targets import BUILTIN_CATALOG, TargetDescriptor
from autostart_resolver.config.loader import ConfigError, load_config, load_yaml_or_json


def _write(path: Path, text: str) -> Path:
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


def test_defaults_without_file_or_env() -> None:
    cfg = load_config(environ={})
    assert cfg.adb_path == "adb"
    assert cfg.serial is None
    assert cfg.package is None
    assert cfg.timeout_s == 10.0
    assert cfg.build_catalog() is BUILTIN_CATALOG


def test_yaml_file_is_loaded_and_catalog_extended(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "autostart.yaml",
        """
        adb_path: /opt/android/platform-tools/adb
        serial: emulator-5554
        package: com.example.app
        timeout_s: 4
        catalog:
          extra:
            Nothing: com.nothing.settings/com.nothing.settings.Autostart
        """,
    )
    cfg = load_config(path, environ={})
    assert cfg.adb_path == "/opt/android/platform-tools/adb"
    assert cfg.serial == "emulator-5554"
    assert cfg.package == "com.example.app"
    assert cfg.timeout_s == 4.0
    assert cfg.build_catalog().lookup("nothing") == TargetDescriptor(
        "com.nothing.settings", "com.nothing.settings.Autostart"
    )


def test_json_file_is_supported(tmp_path: Path) -> None:
    path = tmp_path / "autostart.json"
    path.write_text(json.dumps({"package": "com.example.app"}), encoding="utf-8")
    assert load_config(path, environ={}).package == "com.example.app"


def test_environment_overrides_file(tmp_path: Path) -> None:
    path = _write(tmp_path / "c.yml", "package: com.file.app\ntimeout_s: 3\n")
    cfg = load_config(
        path,
        environ={
            "AUTOSTART_PACKAGE": "com.env.app",
            "AUTOSTART_TIMEOUT_S": "7.5",
            "AUTOSTART_ANDROID_SERIAL": "R58M",
        },
    )
    assert cfg.package == "com.env.app"
    assert cfg.timeout_s == 7.5
    assert cfg.serial == "R58M"


def test_config_path_from_environment(tmp_path: Path) -> None:
    path = _write(tmp_path / "c.yaml", "package: com.from.env.path\n")
    cfg = load_config(environ={"AUTOSTART_CONFIG": str(path)})
    assert cfg.package == "com.from.env.path"


@pytest.mark.parametrize(
    "text",
    [
        "unknown_key: 1\n",
        "timeout_s: 0\n",
        "timeout_s: fast\n",
        "catalog:\n  extra:\n    nothing: not-a-component\n",
        "catalog:\n  other: {}\n",
    ],
)
def test_schema_violations_are_rejected(tmp_path: Path, text: str) -> None:
    path = _write(tmp_path / "bad.yaml", text)
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_bad_timeout_env_is_rejected() -> None:
    with pytest.raises(ConfigError):
        load_config(environ={"AUTOSTART_TIMEOUT_S": "soon"})
    with pytest.raises(ConfigError):
        load_config(environ={"AUTOSTART_TIMEOUT_S": "-1"})


def test_load_yaml_or_json_is_strict(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_yaml_or_json(tmp_path / "missing.yaml")
    with pytest.raises(ConfigError):
        load_yaml_or_json(_write(tmp_path / "list.yaml", "- a\n- b\n"))
    with pytest.raises(ConfigError):
        load_yaml_or_json(_write(tmp_path / "cfg.toml", "a = 1\n"))
    with pytest.raises(ConfigError):
        load_yaml_or_json(_write(tmp_path / "broken.yaml", "package: [unclosed\n"))
    with pytest.raises(ConfigError):
        load_yaml_or_json(_write(tmp_path / "broken.json", "{not json\n"))
    assert load_yaml_or_json(_write(tmp_path / "empty.yaml", "")) == {}


def test_blank_package_is_unset(tmp_path: Path) -> None:
    assert load_config(environ={"AUTOSTART_PACKAGE": "   "}).package is None
    path = _write(tmp_path / "autostart.yaml", "package: '  '\n")
    assert load_config(path, environ={}).package is None
    cfg = load_config(path, environ={"AUTOSTART_PACKAGE": " com.example.app "})
    assert cfg.package == "com.example.app"
