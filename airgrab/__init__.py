# airgrab/__init__.py
from __future__ import annotations

from importlib import metadata as _metadata

"""
airgrab public package surface.

    import airgrab
    airgrab.parse_air("urn:air:sdxl:lora:civitai:328553@368189")
    airgrab.run_pipeline(airgrab.ClipboardWatcher(), client, paths)
"""

try:
    __version__ = _metadata.version("airgrab")
except _metadata.PackageNotFoundError:  # local dev / not installed
    __version__ = "0.0.1-dev"

from .core import (  # noqa: E402
    AirgrabError,
    AirParseError,
    AirResource,
    CivitaiClient,
    ClipboardWatcher,
    DownloadResult,
    ModelRecord,
    ModelVersionRecord,
    get_category,
    get_config,
    load_config,
    parse_air,
    run_pipeline,
)

__all__ = [
    "__version__",
    "AirResource",
    "parse_air",
    "AirgrabError",
    "AirParseError",
    "CivitaiClient",
    "ModelRecord",
    "ModelVersionRecord",
    "get_category",
    "ClipboardWatcher",
    "DownloadResult",
    "run_pipeline",
    "get_config",
    "load_config",
]
