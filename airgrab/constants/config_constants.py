# config_constants.py
import re
import threading
from dataclasses import dataclass
from pathlib import Path

# Thread-safe creation of download directories
_LOCK = threading.RLock()

# Whitespace and both path separators.
_UNSAFE = re.compile(r"[\s/\\]")
_SEPARATORS = re.compile(r"[/\\]")


def path_segment(value: str) -> str:
    """
    Turn a remote-supplied name into a single directory component.

    Whitespace and path separators become underscores; ``""``, ``.`` and
    ``..`` become underscores too, so the result never leaves its parent.
    """
    segment = _UNSAFE.sub("_", value)
    if segment in ("", ".", ".."):
        return segment.replace(".", "_") or "_"
    return segment


def file_name(value: str) -> str:
    """
    Last component of a remote-supplied file name, or ``""`` when that
    component is empty, ``.`` or ``..``.
    """
    name = _SEPARATORS.split(value)[-1]
    return "" if name in (".", "..") else name


@dataclass(frozen=True)
class DownloadPaths:
    """
    Layout of the download root: ``root/type/category/model/version``.
    """
    root: Path

    def type_dir(self, model_type: str) -> Path:
        return self.root / path_segment(model_type)

    def model_dir(self, model_type: str, category: str, model_name: str, version_name: str) -> Path:
        """
        Return the directory holding one model version's file and images.
        """
        return (
            self.type_dir(model_type)
            / path_segment(category)
            / path_segment(model_name)
            / path_segment(version_name)
        )

    def ensure_root(self) -> Path:
        with _LOCK:
            self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def ensure(self, path: Path) -> Path:
        """
        Create `path` and its parents if missing. Idempotent.
        """
        with _LOCK:
            path.mkdir(parents=True, exist_ok=True)
        return path
