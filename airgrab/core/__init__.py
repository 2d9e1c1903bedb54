# core/__init__.py
from __future__ import annotations

from .air import AirResource, parse_air, parse_model_part
from .channel import HandoffChannel
from .client import CivitaiClient, ProgressCallback
from .config import get_config, load_config, set_config, set_directory, temporary_directory
from .errors import (
    AirgrabError,
    AirParseError,
    ChannelClosed,
    ClientStatusError,
    ConfigError,
    FilesystemError,
    PayloadError,
    RemoteStatusError,
    ResourceError,
    ServiceStatusError,
    TransportError,
    UnauthorizedError,
)
from .orchestrator import DownloadResult, ItemStage, download_models, download_resource
from .pipeline import Pipeline, PipelineReport, run_pipeline
from .records import FileDescriptor, ImageDescriptor, ModelRecord, ModelVersionRecord, get_category
from .source import ClipboardWatcher, accept_any, is_watch_candidate, produce

__all__ = [
    # parser
    "AirResource",
    "parse_air",
    "parse_model_part",
    # records
    "FileDescriptor",
    "ImageDescriptor",
    "ModelRecord",
    "ModelVersionRecord",
    "get_category",
    # client
    "CivitaiClient",
    "ProgressCallback",
    # pipeline
    "HandoffChannel",
    "ClipboardWatcher",
    "accept_any",
    "is_watch_candidate",
    "produce",
    "DownloadResult",
    "ItemStage",
    "download_models",
    "download_resource",
    "Pipeline",
    "PipelineReport",
    "run_pipeline",
    # config
    "get_config",
    "load_config",
    "set_config",
    "set_directory",
    "temporary_directory",
    # errors
    "AirgrabError",
    "AirParseError",
    "ChannelClosed",
    "ClientStatusError",
    "ConfigError",
    "FilesystemError",
    "PayloadError",
    "RemoteStatusError",
    "ResourceError",
    "ServiceStatusError",
    "TransportError",
    "UnauthorizedError",
]
