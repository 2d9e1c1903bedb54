# core/records.py
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Optional
from urllib.parse import unquote, urlparse

from airgrab.constants.tool_constants import CATEGORIES, DEFAULT_CATEGORY

from .errors import PayloadError


def get_category(tags: Iterable[str], categories: Sequence[str] = CATEGORIES) -> str:
    """
    Guess a category for a model from its tags.

    Tags are scanned in order and each is compared (lower-cased) against the
    category list, so the first matching tag wins regardless of where its
    category sits in `categories`. The tag is returned in its original casing.
    Returns "misc" when nothing matches.
    """
    for tag in tags:
        lowered = tag.lower()
        for category in categories:
            if lowered == category:
                return tag
    return DEFAULT_CATEGORY


# ----------------------------
# JSON helpers
# ----------------------------

_MISSING = object()


def _lookup(payload: Mapping[str, Any], key: str, default: Any = _MISSING) -> Any:
    """Case-insensitive key lookup; the API is not consistent about casing."""
    if key in payload:
        return payload[key]
    wanted = key.lower()
    for k, v in payload.items():
        if isinstance(k, str) and k.lower() == wanted:
            return v
    if default is _MISSING:
        raise PayloadError(f"missing field '{key}' in API response")
    return default


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise PayloadError(f"expected a JSON object for {what}, got {type(payload).__name__}")
    return payload


def _as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"field '{key}' is not an integer: {value!r}") from e


def _as_float(value: Any, key: str) -> float:
    try:
        return float(value or 0.0)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"field '{key}' is not a number: {value!r}") from e


def _as_list(value: Any, key: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise PayloadError(f"field '{key}' is not a list")
    return value


# ----------------------------
# Records
# ----------------------------


@dataclass(frozen=True)
class FileDescriptor:
    """A downloadable file of a model version."""

    name: str
    download_url: str
    size_kb: float = 0.0
    type: str = ""
    primary: bool = False

    @property
    def size_bytes(self) -> int:
        """Declared size in bytes. Advisory; only used to size progress bars."""
        return int(self.size_kb * 1024)

    @classmethod
    def from_json(cls, payload: Any) -> "FileDescriptor":
        data = _require_mapping(payload, "file")
        return cls(
            name=str(_lookup(data, "name")),
            download_url=str(_lookup(data, "downloadUrl")),
            size_kb=_as_float(_lookup(data, "sizeKB", 0.0), "sizeKB"),
            type=str(_lookup(data, "type", "") or ""),
            primary=bool(_lookup(data, "primary", False)),
        )


@dataclass(frozen=True)
class ImageDescriptor:
    """A preview image of a model version."""

    url: str

    @property
    def file_name(self) -> str:
        """Last segment of the URL path; empty if the path has none."""
        return PurePosixPath(unquote(urlparse(self.url).path)).name

    @classmethod
    def from_json(cls, payload: Any) -> "ImageDescriptor":
        data = _require_mapping(payload, "image")
        return cls(url=str(_lookup(data, "url")))


@dataclass(frozen=True)
class ModelVersionRecord:
    """
    A release of a model, as returned by ``GET /model-versions/{id}``.

    Parameters
    ----------
    id : int
        Version id.
    name : str
        Version name (used as the last directory segment).
    model_id : int
        Id of the owning model.
    type : str
        Version type, when the API reports one.
    files : tuple[FileDescriptor, ...]
        Files in API order.
    images : tuple[ImageDescriptor, ...]
        Preview images in API order.
    """

    id: int
    name: str
    model_id: int
    type: str = ""
    files: tuple[FileDescriptor, ...] = ()
    images: tuple[ImageDescriptor, ...] = ()

    def primary_file(self) -> Optional[FileDescriptor]:
        """Return the first file flagged primary, or None."""
        for f in self.files:
            if f.primary:
                return f
        return None

    @classmethod
    def from_json(cls, payload: Any) -> "ModelVersionRecord":
        data = _require_mapping(payload, "model version")
        return cls(
            id=_as_int(_lookup(data, "id"), "id"),
            name=str(_lookup(data, "name")),
            model_id=_as_int(_lookup(data, "modelId"), "modelId"),
            type=str(_lookup(data, "type", "") or ""),
            files=tuple(FileDescriptor.from_json(f) for f in _as_list(_lookup(data, "files", None), "files")),
            images=tuple(
                ImageDescriptor.from_json(i) for i in _as_list(_lookup(data, "images", None), "images")
            ),
        )


@dataclass(frozen=True)
class ModelRecord:
    """
    A model, as returned by ``GET /models/{id}``.

    `category` is derived from `tags` once, at construction.
    """

    id: int
    name: str
    type: str
    tags: tuple[str, ...] = ()
    category: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", get_category(self.tags))

    @classmethod
    def from_json(cls, payload: Any) -> "ModelRecord":
        data = _require_mapping(payload, "model")
        return cls(
            id=_as_int(_lookup(data, "id"), "id"),
            name=str(_lookup(data, "name")),
            type=str(_lookup(data, "type")),
            tags=tuple(str(t) for t in _as_list(_lookup(data, "tags", None), "tags")),
        )


__all__ = [
    "get_category",
    "FileDescriptor",
    "ImageDescriptor",
    "ModelVersionRecord",
    "ModelRecord",
]
