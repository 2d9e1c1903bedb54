# core/config.py
from __future__ import annotations

import os
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from threading import RLock
from typing import Any, Optional

import yaml
from appdirs import user_config_dir

from airgrab.constants.tool_configs import (
    DEFAULT_DIRECTORY,
    DEFAULT_POLL_INTERVAL,
    ToolConfig,
    expand_directory,
)
from airgrab.constants.tool_configs import get_config as _get_config
from airgrab.constants.tool_configs import set_config as _set_config
from airgrab.constants.tool_constants import _ENV_PREFIX, CIVITAI_API_HOST
from airgrab.logging import get_logger

from .errors import ConfigError

_LOG = get_logger(__name__)
_LOCK = RLock()

CONFIG_ENV = f"{_ENV_PREFIX}CONFIG"

DEFAULTS: dict[str, Any] = {
    "api_key": "",
    "directory": DEFAULT_DIRECTORY,
    "api_host": CIVITAI_API_HOST,
    "timeout": None,
    "poll_interval": DEFAULT_POLL_INTERVAL,
}


def default_config_path() -> Path:
    """
    Config file location: $AIRGRAB_CONFIG, else the user config dir.
    """
    env = os.getenv(CONFIG_ENV)
    if env:
        return Path(env).expanduser()
    return Path(user_config_dir("airgrab")) / "config.yaml"


def write_default_config(path: Path) -> Path:
    """Create `path` (and parents) holding the default settings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(DEFAULTS, fh, default_flow_style=False, sort_keys=False)
    _LOG.info("Wrote default config to %s", path)
    return path


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return dict(data)


def _optional_float(value: Any, key: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'{key}' must be a number, got {value!r}") from e


def _env_overrides() -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in DEFAULTS:
        val = os.getenv(f"{_ENV_PREFIX}{key.upper()}")
        if val is not None:
            out[key] = val
    return out


def build_config(settings: Mapping[str, Any]) -> ToolConfig:
    """
    Build a ToolConfig from raw settings (file values merged with env).

    Raises
    ------
    ConfigError
        If a numeric setting is not a number.
    """
    merged = {**DEFAULTS, **{k: v for k, v in settings.items() if k in DEFAULTS}}
    unknown = sorted(set(settings) - set(DEFAULTS))
    if unknown:
        _LOG.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

    poll = _optional_float(merged["poll_interval"], "poll_interval")
    return ToolConfig(
        api_key=str(merged["api_key"] or "") or None,
        directory=expand_directory(merged["directory"] or DEFAULT_DIRECTORY),
        api_host=str(merged["api_host"] or CIVITAI_API_HOST),
        timeout=_optional_float(merged["timeout"], "timeout"),
        poll_interval=DEFAULT_POLL_INTERVAL if poll is None else poll,
    )


def load_config(path: Optional[Path | str] = None, *, create: bool = True) -> ToolConfig:
    """
    Load configuration from YAML, applying AIRGRAB_* environment overrides.

    A missing file is created with defaults when `create` is True.
    """
    cfg_path = Path(path).expanduser() if path is not None else default_config_path()
    _LOG.info("Loading config from %s", cfg_path)

    settings: dict[str, Any] = {}
    if cfg_path.exists():
        settings = _read_yaml(cfg_path)
    elif create:
        try:
            write_default_config(cfg_path)
        except OSError as e:
            raise ConfigError(f"Failed to create config {cfg_path}: {e}") from e

    settings.update(_env_overrides())
    return build_config(settings)


def get_config() -> ToolConfig:
    """Return the process default ToolConfig."""
    with _LOCK:
        return _get_config()


def set_config(cfg: ToolConfig) -> None:
    with _LOCK:
        _set_config(cfg)


def set_directory(new_root: Path | str) -> None:
    """
    Override the download root of the process default config, keeping the
    other settings.
    """
    with _LOCK:
        cfg = _get_config().with_directory(new_root)
        _set_config(cfg)
    _LOG.info("Download directory set to: %s", cfg.directory)


@contextmanager
def temporary_directory(temp_root: Path | str) -> Generator[None, None, None]:
    """
    Temporarily override the download root (useful for tests or isolated runs).
    """
    prev = get_config()
    set_config(replace(prev, directory=expand_directory(temp_root)))
    try:
        yield
    finally:
        set_config(prev)


__all__ = [
    "CONFIG_ENV",
    "DEFAULTS",
    "ToolConfig",
    "build_config",
    "default_config_path",
    "get_config",
    "load_config",
    "set_config",
    "set_directory",
    "temporary_directory",
    "write_default_config",
]
