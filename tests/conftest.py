"""Shared fakes and fixtures for all test suites."""
from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from typing import Any, Callable, Dict, List, Optional, Union

import pytest
import requests

from airgrab.logging import reset_logging


def pytest_configure(config):
    # Module-level loggers configure the package root at import time.
    os.environ.setdefault("AIRGRAB_LOG_FILE", os.path.join(tempfile.mkdtemp(prefix="airgrab-tests-"), "airgrab.log"))
    os.environ.setdefault("AIRGRAB_LOG_STDERR", "0")


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self,
        status_code: int = 200,
        *,
        json_data: Any = None,
        chunks: Optional[List[bytes]] = None,
        fail_after: Optional[int] = None,
    ) -> None:
        self.status_code = status_code
        self._json = json_data
        self._chunks = chunks or []
        self._fail_after = fail_after
        self.closed = False

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("no JSON body")
        return self._json

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        for i, chunk in enumerate(self._chunks):
            if self._fail_after is not None and i >= self._fail_after:
                raise requests.exceptions.ChunkedEncodingError("connection broken")
            yield chunk

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


Route = Union[FakeResponse, Callable[[], FakeResponse], Exception]


class FakeSession:
    """
    Routes requests by exact URL. Unknown URLs raise ConnectionError.
    Every call is recorded in `calls`.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method, url, headers=None, stream=False, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "headers": dict(headers or {}), "stream": stream, "timeout": timeout}
        )
        route = self.routes.get(url)
        if route is None:
            raise requests.exceptions.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route()
        return route

    def close(self) -> None:
        self.closed = True

    def urls(self) -> List[str]:
        return [c["url"] for c in self.calls]


API = "https://civitai.test/api/v1"


def version_payload(
    version_id: int = 5678,
    model_id: int = 1234,
    *,
    name: str = "v1.0 final",
    files: Optional[List[Dict[str, Any]]] = None,
    images: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    if files is None:
        files = [
            {
                "name": "model.safetensors",
                "sizeKB": 0.01,
                "type": "Model",
                "primary": True,
                "downloadUrl": f"https://civitai.test/api/download/models/{version_id}",
            }
        ]
    if images is None:
        images = [{"url": "https://image.civitai.test/abc/width=450/preview-1.jpeg"}]
    return {"id": version_id, "name": name, "modelId": model_id, "files": files, "images": images}


def model_payload(model_id: int = 1234, *, name: str = "Cool Model", type_: str = "LORA", tags=None) -> Dict[str, Any]:
    return {"id": model_id, "name": name, "type": type_, "tags": ["anime", "Character", "style"] if tags is None else tags}


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def civitai_routes(fake_session: FakeSession) -> FakeSession:
    """A session serving model 1234 / version 5678 with one file and one image."""
    fake_session.routes.update(
        {
            f"{API}/model-versions/5678": lambda: FakeResponse(json_data=version_payload()),
            f"{API}/models/1234": lambda: FakeResponse(json_data=model_payload()),
            "https://civitai.test/api/download/models/5678": lambda: FakeResponse(chunks=[b"weights-", b"data"]),
            "https://image.civitai.test/abc/width=450/preview-1.jpeg": lambda: FakeResponse(chunks=[b"\xff\xd8jpeg"]),
        }
    )
    return fake_session


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path, monkeypatch) -> Iterator[None]:
    """Keep AIRGRAB_* settings, log files and config out of the user's home."""
    for key in list(os.environ.keys()):
        if key.startswith("AIRGRAB_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("AIRGRAB_LOG_FILE", str(tmp_path / "logs" / "airgrab.log"))
    monkeypatch.setenv("AIRGRAB_LOG_STDERR", "0")
    monkeypatch.setenv("AIRGRAB_CONFIG", str(tmp_path / "config" / "config.yaml"))
    reset_logging("airgrab")
    yield
    reset_logging("airgrab")


@pytest.fixture
def api_host() -> str:
    return API


@pytest.fixture
def make_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def make_session() -> type[FakeSession]:
    return FakeSession


@pytest.fixture
def payloads():
    """Builders for API JSON bodies: payloads.version(...), payloads.model(...)."""

    class _Payloads:
        version = staticmethod(version_payload)
        model = staticmethod(model_payload)

    return _Payloads
