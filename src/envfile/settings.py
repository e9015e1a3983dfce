from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from envfile.errors import SettingsError
from envfile.resolver import DEFAULT_ENV_FILE_NAME


@dataclass(frozen=True)
class EnwSettings:
    default_file_name: str = DEFAULT_ENV_FILE_NAME
    load_implicit_env_file: bool = True
    ignore_env: bool = False
    log_level: str = "WARNING"


def _expand_home(raw: str, home: str) -> Path:
    if home and (raw == "~" or raw.startswith("~/")):
        return Path(home) / raw[2:]
    return Path(raw)


def default_settings_path(environ: Mapping[str, str]) -> Path | None:
    """Locate the settings file using only the given environment snapshot.

    Returns None when neither ENW_CONFIG, XDG_CONFIG_HOME nor HOME is set.
    """
    home = environ.get("HOME", "").strip()
    explicit = environ.get("ENW_CONFIG", "").strip()
    if explicit:
        return _expand_home(explicit, home)
    config_home = environ.get("XDG_CONFIG_HOME", "").strip()
    if config_home:
        return _expand_home(config_home, home) / "enw" / "config.yaml"
    if home:
        return Path(home) / ".config" / "enw" / "config.yaml"
    return None


def _read_settings_yaml(path: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, UnicodeDecodeError) as exc:
        raise SettingsError(f"cannot read settings file '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise SettingsError(f"invalid YAML in settings file '{path}': {exc}") from exc
    if not isinstance(payload, dict):
        raise SettingsError(f"Settings file must contain a YAML object: {path}")
    return payload


def _typed(payload: dict[str, Any], name: str, kind: type, default: Any, path: Path) -> Any:
    value = payload.get(name, default)
    if not isinstance(value, kind):
        raise SettingsError(f"Invalid {name} in settings file {path}: expected {kind.__name__}")
    return value


def _normalize_level(raw: str, origin: str) -> str:
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise SettingsError(f"Unknown log level '{raw}' in {origin}")
    return level


def load_settings(environ: Mapping[str, str], path: Path | None = None) -> EnwSettings:
    path = path or default_settings_path(environ)
    settings = EnwSettings()
    if path is not None and path.is_file():
        payload = _read_settings_yaml(path)
        default_file_name = _typed(payload, "default_file_name", str, settings.default_file_name, path).strip()
        if not default_file_name:
            raise SettingsError(f"Invalid default_file_name in settings file {path}: must not be empty")
        settings = EnwSettings(
            default_file_name=default_file_name,
            load_implicit_env_file=_typed(payload, "load_implicit_env_file", bool, settings.load_implicit_env_file, path),
            ignore_env=_typed(payload, "ignore_env", bool, settings.ignore_env, path),
            log_level=_normalize_level(_typed(payload, "log_level", str, settings.log_level, path), str(path)),
        )

    level_override = environ.get("ENW_LOG_LEVEL", "").strip()
    if level_override:
        settings = replace(settings, log_level=_normalize_level(level_override, "ENW_LOG_LEVEL"))
    return settings
