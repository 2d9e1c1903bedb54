# core/orchestrator.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from airgrab.constants.config_constants import DownloadPaths, file_name
from airgrab.logging import add_context, get_logger
from airgrab.misc.progress import ProgressFactory, transfer_progress

from .air import AirResource
from .client import CivitaiClient
from .errors import AirgrabError, FilesystemError, ResourceError
from .records import ModelRecord, ModelVersionRecord

logger = get_logger(__name__)
add_context(logger, component="orchestrator")


class ItemStage(str, Enum):
    """Furthest point a pipeline item reached."""
    received = "received"
    version_resolved = "version-resolved"
    model_resolved = "model-resolved"
    path_constructed = "path-constructed"
    file_downloaded = "file-downloaded"
    images_downloaded = "images-downloaded"


@dataclass(frozen=True)
class DownloadResult:
    """
    Outcome of one pipeline item.

    `stage` is the last stage completed; on failure `error` holds the reason.
    Files already written before a failure stay on disk and are listed.
    """

    resource: AirResource
    ok: bool
    stage: ItemStage
    directory: Optional[Path] = None
    files: tuple[Path, ...] = ()
    error: Optional[AirgrabError] = None


def model_directory(paths: DownloadPaths, model: ModelRecord, version: ModelVersionRecord) -> Path:
    """Destination directory for one model version (not created)."""
    return paths.model_dir(model.type, model.category, model.name, version.name)


def download_model_version(
    client: CivitaiClient,
    version: ModelVersionRecord,
    directory: Path,
    *,
    progress_factory: ProgressFactory = transfer_progress,
    written: Optional[list[Path]] = None,
) -> list[Path]:
    """
    Download the primary file of `version` and then each of its images.

    The first failing image aborts the rest; nothing is rolled back.

    Raises
    ------
    ResourceError
        If the version has no primary file or a file or image URL has no
        usable file name.
    """
    written = [] if written is None else written

    primary = version.primary_file()
    if primary is None:
        raise ResourceError(f"{version.name} has no primary file.")

    name = file_name(primary.name)
    if not name:
        raise ResourceError(f"{version.name} primary file has no usable name: {primary.name!r}")
    model_path = directory / name
    with progress_factory(f"Downloading: {name}", primary.size_bytes) as advance:
        client.download(primary.download_url, model_path, advance)
    written.append(model_path)

    logger.info("Downloading images")
    for image in version.images:
        name = file_name(image.file_name)
        if not name:
            raise ResourceError(f"cannot derive a file name from image url {image.url!r}")
        image_path = directory / name
        client.download(image.url, image_path)
        written.append(image_path)
    return written


def download_resource(
    client: CivitaiClient,
    resource: AirResource,
    paths: DownloadPaths,
    *,
    progress_factory: ProgressFactory = transfer_progress,
) -> DownloadResult:
    """
    Resolve and download one AIR. Never raises AirgrabError: every failure is
    returned in the result together with the stage reached.
    """
    stage = ItemStage.received
    directory: Optional[Path] = None
    written: list[Path] = []
    try:
        version = client.get_model_version(resource.version_id)
        stage = ItemStage.version_resolved

        model = client.get_model(version.model_id)
        stage = ItemStage.model_resolved

        directory = model_directory(paths, model, version)
        try:
            paths.ensure(directory)
        except OSError as e:
            raise FilesystemError(f"cannot create {directory}: {e}") from e
        stage = ItemStage.path_constructed
        logger.debug("Model directory: %s", directory)

        download_model_version(client, version, directory, progress_factory=progress_factory, written=written)
        stage = ItemStage.images_downloaded
    except AirgrabError as e:
        if written and stage is ItemStage.path_constructed:
            stage = ItemStage.file_downloaded
        return DownloadResult(resource, False, stage, directory, tuple(written), e)
    return DownloadResult(resource, True, stage, directory, tuple(written))


def _log_result(result: DownloadResult) -> None:
    if result.ok:
        logger.info("Download complete: %s -> %s", result.resource, result.directory)
        return
    if result.stage is ItemStage.received:
        logger.error("Error getting version data for %s: %s", result.resource, result.error)
    elif result.stage is ItemStage.version_resolved:
        logger.error("Error getting model data for %s: %s", result.resource, result.error)
    else:
        logger.error("Error downloading %s: %s", result.resource, result.error)


def download_models(
    client: CivitaiClient,
    paths: DownloadPaths,
    resources: Iterable[AirResource],
    *,
    progress_factory: ProgressFactory = transfer_progress,
) -> list[DownloadResult]:
    """
    Consumer loop: process each resource in order until the stream ends.

    One item's failure never stops the loop.
    """
    logger.info("Waiting for models to download...")
    results: list[DownloadResult] = []
    for resource in resources:
        logger.info("Resource found: %s", resource)
        try:
            result = download_resource(client, resource, paths, progress_factory=progress_factory)
        except Exception as e:
            logger.exception("Unexpected failure while downloading %s", resource)
            result = DownloadResult(resource, False, ItemStage.received, error=AirgrabError(str(e)))
        _log_result(result)
        results.append(result)
    logger.info("Download loop finished (%d items)", len(results))
    return results


__all__ = [
    "ItemStage",
    "DownloadResult",
    "model_directory",
    "download_model_version",
    "download_resource",
    "download_models",
]
