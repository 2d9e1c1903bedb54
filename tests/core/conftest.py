# tests/core/conftest.py
from __future__ import annotations

from pathlib import Path

import pytest

from airgrab.constants.config_constants import DownloadPaths
from airgrab.logging import setup_logger


@pytest.fixture
def paths(tmp_path) -> DownloadPaths:
    return DownloadPaths(tmp_path / "models")


@pytest.fixture
def log_file(tmp_path) -> Path:
    """Route the package logger to a file at DEBUG and return its path."""
    path = tmp_path / "core.log"
    setup_logger("airgrab", level="DEBUG", with_console=False, file_path=path, force_reconfigure=True)
    return path
