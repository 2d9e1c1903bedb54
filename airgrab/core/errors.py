# core/errors.py
from __future__ import annotations

from typing import Optional


class AirgrabError(Exception):
    """Base error for airgrab."""


class ConfigError(AirgrabError):
    """Raised when the configuration file cannot be read or is invalid."""


class AirParseError(AirgrabError, ValueError):
    """
    Raised when a string is not a well-formed AIR.

    Attributes
    ----------
    identifier : str
        The full input that failed to parse.
    fragment : Optional[str]
        The offending piece of the input, when one can be named.
    field : Optional[str]
        The field being parsed ("model id", "version id"), when relevant.
    """

    def __init__(
        self,
        message: str,
        *,
        identifier: str,
        fragment: Optional[str] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.identifier = identifier
        self.fragment = fragment
        self.field = field


class TransportError(AirgrabError):
    """Raised when the remote service cannot be reached or the stream breaks."""


class RemoteStatusError(AirgrabError):
    """Raised for a non-2xx response. `status_code` keeps the raw code."""

    def __init__(self, status_code: int, url: str, message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message or f"HTTP Error: {status_code}")


class UnauthorizedError(RemoteStatusError):
    """401: the request needs a (valid) API key."""

    def __init__(self, url: str) -> None:
        super().__init__(401, url, "HTTP Error: 401: Unauthorized Request, check your API key.")


class ClientStatusError(RemoteStatusError):
    """4xx other than 401."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(status_code, url, f"HTTP Error: {status_code}: Bad Request. Civitai may be down.")


class ServiceStatusError(RemoteStatusError):
    """5xx."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(
            status_code,
            url,
            f"HTTP Error: {status_code}: Service Unavailable. "
            "Civitai may be down or conducting maintenance.",
        )


class PayloadError(AirgrabError):
    """Raised when an API response body is not the expected JSON shape."""


class ResourceError(AirgrabError):
    """Raised when a model version cannot be downloaded (e.g., no primary file)."""


class FilesystemError(AirgrabError):
    """Raised when a directory or file cannot be created or written."""


class ChannelClosed(AirgrabError):
    """Raised by a closed handoff channel."""


def status_error(status_code: int, url: str) -> RemoteStatusError:
    """Map a non-2xx status code to the matching error kind."""
    if status_code == 401:
        return UnauthorizedError(url)
    if 400 <= status_code < 500:
        return ClientStatusError(status_code, url)
    if 500 <= status_code < 600:
        return ServiceStatusError(status_code, url)
    return RemoteStatusError(status_code, url)


__all__ = [
    "AirgrabError",
    "ConfigError",
    "AirParseError",
    "TransportError",
    "RemoteStatusError",
    "UnauthorizedError",
    "ClientStatusError",
    "ServiceStatusError",
    "PayloadError",
    "ResourceError",
    "FilesystemError",
    "ChannelClosed",
    "status_error",
]
