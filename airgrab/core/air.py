# core/air.py
from __future__ import annotations

import re
from dataclasses import dataclass

from airgrab.constants.tool_constants import AIR_PREFIXES, UNSPECIFIED_VERSION

from .errors import AirParseError

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class AirResource:
    """
    Coordinates of a resource named by an AIR urn.

    Parameters
    ----------
    ecosystem : str
        Model ecosystem, e.g. "sdxl".
    type : str
        Resource type, e.g. "lora" or "checkpoint".
    source : str
        Provider hosting the resource, e.g. "civitai".
    model_id : int
        Numeric model id. Always present.
    version_id : int, default=-1
        Numeric version id; -1 when the AIR does not name one.
    format : str, default=""
        Optional file format suffix; empty when absent.
    """

    ecosystem: str
    type: str
    source: str
    model_id: int
    version_id: int = UNSPECIFIED_VERSION
    format: str = ""

    @property
    def has_version(self) -> bool:
        return self.version_id != UNSPECIFIED_VERSION

    @property
    def urn(self) -> str:
        """Canonical ``urn:air:`` rendering."""
        model_part = str(self.model_id)
        if self.has_version:
            model_part += f"@{self.version_id}"
        if self.format:
            model_part += f".{self.format}"
        return f"urn:air:{self.ecosystem}:{self.type}:{self.source}:{model_part}"

    def __str__(self) -> str:
        return self.urn


def _parse_int(fragment: str, field: str, identifier: str) -> int:
    if not _INTEGER.fullmatch(fragment):
        raise AirParseError(
            f"unable to parse {field}: '{fragment}' to integer",
            identifier=identifier,
            fragment=fragment,
            field=field,
        )
    return int(fragment)


def parse_model_part(model_part: str, identifier: str | None = None) -> tuple[int, int, str]:
    """
    Split ``modelId[@versionId][.format]`` into its three parts.

    Returns
    -------
    tuple[int, int, str]
        (model_id, version_id, format); version_id is -1 and format is ""
        when absent.

    Raises
    ------
    AirParseError
        On more than one '.' or '@', or a non-integer id.
    """
    identifier = model_part if identifier is None else identifier

    elements = model_part.split(".")
    if len(elements) > 2:
        raise AirParseError(
            f"invalid model id: '{model_part}' too many '.' characters",
            identifier=identifier,
            fragment=model_part,
        )
    ids, fmt = (elements[0], elements[1]) if len(elements) == 2 else (elements[0], "")

    elements = ids.split("@")
    if len(elements) > 2:
        raise AirParseError(
            f"invalid model id: '{model_part}' too many '@' characters",
            identifier=identifier,
            fragment=model_part,
        )
    model_id = _parse_int(elements[0], "model id", identifier)
    version_id = (
        _parse_int(elements[1], "version id", identifier) if len(elements) == 2 else UNSPECIFIED_VERSION
    )
    return model_id, version_id, fmt


def _strip_prefix(lower: str) -> str | None:
    for prefix in AIR_PREFIXES:
        if lower.startswith(prefix):
            return lower[len(prefix):]
    return None


def parse_air(identifier: str) -> AirResource:
    """
    Parse an AIR urn.

    Accepted forms::

        urn:air:{ecosystem}:{type}:{source}:{id}[@{version}][.{format}]
        urn:{ecosystem}:{type}:{source}:{id}[@{version}][.{format}]
        air:{ecosystem}:{type}:{source}:{id}[@{version}][.{format}]

    Surrounding whitespace is stripped and the whole identifier is lower-cased
    before any field is extracted.

    Raises
    ------
    AirParseError
        If the prefix is unknown, the field count is not 4, or the model part
        is malformed.
    """
    lower = identifier.strip().lower()

    uri = _strip_prefix(lower)
    if uri is None:
        raise AirParseError(f"invalid AIR: {identifier}", identifier=identifier)

    elements = uri.split(":")
    if len(elements) != 4:
        raise AirParseError(f"invalid AIR: {identifier}", identifier=identifier, fragment=uri)

    ecosystem, type_name, source, model_part = elements
    model_id, version_id, fmt = parse_model_part(model_part, identifier)
    return AirResource(
        ecosystem=ecosystem,
        type=type_name,
        source=source,
        model_id=model_id,
        version_id=version_id,
        format=fmt,
    )


__all__ = ["AirResource", "parse_air", "parse_model_part"]
