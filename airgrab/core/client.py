# core/client.py
from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Optional

import requests

from airgrab.constants.tool_constants import CIVITAI_API_HOST, DOWNLOAD_CHUNK_SIZE
from airgrab.logging import get_logger

from .errors import FilesystemError, PayloadError, TransportError, status_error
from .records import ModelRecord, ModelVersionRecord

logger = get_logger(__name__)

# Receives the number of bytes written for each chunk.
ProgressCallback = Callable[[int], None]


class CivitaiClient:
    """
    Thin client over the Civitai REST API.

    The credential is fixed at construction; every request carries it as a
    bearer token when present. Nothing is cached between calls.

    Parameters
    ----------
    api_key : Optional[str]
        API key. None or "" sends no Authorization header; resources that
        need a login then fail with UnauthorizedError.
    host : str
        Base URL of the API.
    session : Optional[requests.Session]
        Session to use (connection pooling); a new one is created if None.
    timeout : Optional[float]
        Per-request timeout in seconds. None waits indefinitely.
    chunk_size : int
        Read size for streamed downloads.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        host: str = CIVITAI_API_HOST,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE,
    ) -> None:
        self._api_key = api_key or None
        self.host = host.rstrip("/")
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._session = session if session is not None else requests.Session()

    @property
    def has_credentials(self) -> bool:
        return self._api_key is not None

    # ---------- transport ----------

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        *,
        stream: bool = False,
    ) -> requests.Response:
        """
        Send a request and return the response if its status is 2xx.

        Raises
        ------
        TransportError
            If the request cannot be sent or no response arrives.
        RemoteStatusError
            For any other status (UnauthorizedError on 401).
        """
        hdrs = dict(headers or {})
        if self._api_key is not None:
            hdrs["Authorization"] = f"Bearer {self._api_key}"

        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(method, url, headers=hdrs, stream=stream, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        code = response.status_code
        if 200 <= code < 300:
            return response
        response.close()
        raise status_error(code, url)

    def get(self, url: str, headers: Optional[Mapping[str, str]] = None, *, stream: bool = False) -> requests.Response:
        return self.request("GET", url, headers, stream=stream)

    def head(self, url: str, headers: Optional[Mapping[str, str]] = None) -> requests.Response:
        return self.request("HEAD", url, headers)

    def get_json(self, url: str) -> Any:
        with self.get(url, {"Content-Type": "application/json"}) as response:
            try:
                return response.json()
            except ValueError as e:
                raise PayloadError(f"invalid JSON from {url}: {e}") from e

    # ---------- metadata ----------

    def get_model_version(self, version_id: int) -> ModelVersionRecord:
        logger.debug("Getting model version from id: %d", version_id)
        return ModelVersionRecord.from_json(self.get_json(f"{self.host}/model-versions/{version_id}"))

    def get_model(self, model_id: int) -> ModelRecord:
        logger.debug("Getting model from id: %d", model_id)
        return ModelRecord.from_json(self.get_json(f"{self.host}/models/{model_id}"))

    # ---------- content ----------

    def download(self, url: str, path: Path | str, progress: Optional[ProgressCallback] = None) -> int:
        """
        Stream `url` into `path` (created or truncated), chunk by chunk.

        `progress`, if given, is called with the size of every chunk written.
        No retry and no size verification.

        Returns
        -------
        int
            Bytes written.
        """
        logger.debug("Downloading %s -> %s", url, path)
        written = 0
        with self.get(url, stream=True) as response:
            try:
                fh = open(path, "wb")
            except OSError as e:
                raise FilesystemError(f"cannot create {path}: {e}") from e
            with fh:
                try:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if not chunk:
                            continue
                        try:
                            fh.write(chunk)
                        except OSError as e:
                            raise FilesystemError(f"cannot write {path}: {e}") from e
                        written += len(chunk)
                        if progress is not None:
                            progress(len(chunk))
                except requests.RequestException as e:
                    raise TransportError(f"download of {url} interrupted: {e}") from e
        return written

    # ---------- lifecycle ----------

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "CivitaiClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


__all__ = ["CivitaiClient", "ProgressCallback"]
