# tool_configs.py
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from .config_constants import DownloadPaths
from .logging_constants import env_log_level
from .tool_constants import CIVITAI_API_HOST

DEFAULT_DIRECTORY = "$HOME/stable_diffusion/models"
DEFAULT_POLL_INTERVAL = 0.5


def expand_directory(raw: str | os.PathLike) -> Path:
    """Expand environment variables and '~' in a configured directory."""
    return Path(os.path.expandvars(str(raw))).expanduser()


@dataclass(frozen=True)
class ToolConfig:
    """
    Immutable runtime configuration for airgrab.

    The client and the pipeline receive an instance explicitly; the module-level
    default below only exists for the CLI.
    """

    api_key: Optional[str] = None
    directory: Path = field(default_factory=lambda: expand_directory(DEFAULT_DIRECTORY))
    api_host: str = CIVITAI_API_HOST
    timeout: Optional[float] = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    log_level: int = field(default_factory=env_log_level)

    @property
    def paths(self) -> DownloadPaths:
        return DownloadPaths(self.directory)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    def with_directory(self, directory: Path | str) -> "ToolConfig":
        return replace(self, directory=expand_directory(directory))


_GLOBAL: ToolConfig | None = None


def get_config() -> ToolConfig:
    """
    Return the process default ToolConfig, creating it on first use.
    """
    global _GLOBAL
    if _GLOBAL is None:
        _GLOBAL = ToolConfig()
    return _GLOBAL


def set_config(cfg: ToolConfig) -> None:
    """
    Replace the process default ToolConfig.
    """
    global _GLOBAL
    _GLOBAL = cfg
