# __init__.py
"""
Public constants API for airgrab.constants.

This module re-exports selected names to provide a clean and stable surface.
"""

from .cli_constants import DebugMode, SortOption
from .config_constants import DownloadPaths, file_name, path_segment
from .logging_constants import (
    LOG_DEFAULT_BACKUPS,
    LOG_DEFAULT_JSON,
    LOG_DEFAULT_LEVEL,
    LOG_DEFAULT_MAX_BYTES,
    LOG_DEFAULT_NAME,
    LOG_DEFAULT_STDERR,
    LOG_ENV_PREFIX,
    LOG_LEVEL_MAP,
    env_log_json,
    env_log_level,
    env_log_stderr,
)
from .tool_configs import ToolConfig, expand_directory, get_config, set_config
from .tool_constants import (
    _ENV_PREFIX as AIRGRAB_ENV_PREFIX,
)
from .tool_constants import (
    AIR_PREFIXES,
    AIR_WATCH_PREFIX,
    CATEGORIES,
    CIVITAI_API_HOST,
    DEFAULT_CATEGORY,
    DOWNLOAD_CHUNK_SIZE,
    UNSPECIFIED_VERSION,
)

__all__ = [
    # tool_constants
    "AIRGRAB_ENV_PREFIX",
    "AIR_PREFIXES",
    "AIR_WATCH_PREFIX",
    "CATEGORIES",
    "CIVITAI_API_HOST",
    "DEFAULT_CATEGORY",
    "DOWNLOAD_CHUNK_SIZE",
    "UNSPECIFIED_VERSION",
    # config_constants
    "DownloadPaths",
    "path_segment",
    "file_name",
    # tool_configs
    "ToolConfig",
    "expand_directory",
    "get_config",
    "set_config",
    # logging_constants
    "LOG_ENV_PREFIX",
    "LOG_DEFAULT_NAME",
    "LOG_DEFAULT_LEVEL",
    "LOG_DEFAULT_JSON",
    "LOG_DEFAULT_STDERR",
    "LOG_DEFAULT_MAX_BYTES",
    "LOG_DEFAULT_BACKUPS",
    "LOG_LEVEL_MAP",
    "env_log_level",
    "env_log_json",
    "env_log_stderr",
    # cli_constants
    "DebugMode",
    "SortOption",
]
