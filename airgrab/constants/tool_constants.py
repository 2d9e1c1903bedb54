# tool_constants.py
from __future__ import annotations

# Environment variable prefix used across the project (e.g., AIRGRAB_API_KEY)
_ENV_PREFIX: str = "AIRGRAB_"

CIVITAI_API_HOST: str = "https://civitai.com/api/v1"

# AIR urn prefixes, tried in this order by the parser.
AIR_PREFIXES: tuple[str, ...] = ("urn:air:", "urn:", "air:")

# The clipboard watcher only admits full urns.
AIR_WATCH_PREFIX: str = "urn:air"

# Version id used when an AIR does not name one. Zero is a valid id.
UNSPECIFIED_VERSION: int = -1

DOWNLOAD_CHUNK_SIZE: int = 1024

# Site categories used to organise models on disk, in priority order.
CATEGORIES: tuple[str, ...] = (
    "character",
    "style",
    "celebrity",
    "concept",
    "clothing",
    "base model",
    "poses",
    "background",
    "tool",
    "buildings",
    "vehicle",
    "objects",
    "animal",
    "action",
    "asset",
)

DEFAULT_CATEGORY: str = "misc"
