"""Explicit shapes for the enclosure-like payloads found in podcast feeds.

Feeds carry audio references in several dialects: a standard ``enclosure``
object, an XML-attribute wrapper (``$``), a nested ``attributes`` object,
Media RSS ``media:content`` entries or a bare URL string. Each raw value is
classified once into an :class:`EnclosureCandidate` so the extractor only
ever deals with a URL and an optional MIME type.
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from keelcast.constants import ENCLOSURE_URL_KEYS


class EnclosureSource(StrEnum):
    """Item fields searched for audio, in priority order."""

    ENCLOSURE = "enclosure"
    MEDIA_CONTENT = "media:content"
    MEDIA_GROUP = "media:group"


class EnclosureShape(StrEnum):
    """Known dialect shapes of a single enclosure value."""

    BARE_URL = "bare_url"
    FLAT = "flat"
    ATTRIBUTE_WRAPPED = "attribute_wrapped"
    NESTED_ATTRIBUTES = "nested_attributes"
    UNRECOGNIZED = "unrecognized"


class EnclosureCandidate(BaseModel):
    """A single enclosure reduced to its URL and declared MIME type."""

    model_config = ConfigDict(frozen=True)

    shape: EnclosureShape = Field(description="Dialect the value was recognised as")
    url: str | None = Field(default=None, description="Candidate URL, if any")
    mime_type: str | None = Field(default=None, description="Declared type attribute")


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _first_string(source: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _mime_type(raw: Mapping[str, Any]) -> str | None:
    for source in (raw, _as_mapping(raw.get("$")), _as_mapping(raw.get("attributes"))):
        value = source.get("type")
        if value:
            return value if isinstance(value, str) else None
    return None


def classify_enclosure(raw: Any) -> EnclosureCandidate:
    """
    Classify one enclosure value into a known shape.

    URL lookup order: ``url``, ``$.url``, ``href``, ``link``, ``src``, then the
    same keys under ``attributes``. MIME type lookup order: ``type``,
    ``$.type``, ``attributes.type``.

    Args:
        raw: A single enclosure value (never a list)

    Returns:
        EnclosureCandidate with the resolved URL and MIME type
    """
    match raw:
        case str():
            return EnclosureCandidate(shape=EnclosureShape.BARE_URL, url=raw or None)

        case Mapping():
            mime_type = _mime_type(raw)

            if url := _first_string(raw, ("url",)):
                return EnclosureCandidate(shape=EnclosureShape.FLAT, url=url, mime_type=mime_type)

            if url := _first_string(_as_mapping(raw.get("$")), ("url",)):
                return EnclosureCandidate(
                    shape=EnclosureShape.ATTRIBUTE_WRAPPED, url=url, mime_type=mime_type
                )

            if url := _first_string(raw, ENCLOSURE_URL_KEYS[1:]):
                return EnclosureCandidate(shape=EnclosureShape.FLAT, url=url, mime_type=mime_type)

            if url := _first_string(_as_mapping(raw.get("attributes")), ENCLOSURE_URL_KEYS):
                return EnclosureCandidate(
                    shape=EnclosureShape.NESTED_ATTRIBUTES, url=url, mime_type=mime_type
                )

            return EnclosureCandidate(shape=EnclosureShape.UNRECOGNIZED, mime_type=mime_type)

        case _:
            return EnclosureCandidate(shape=EnclosureShape.UNRECOGNIZED)


def classify_payload(payload: Any) -> list[EnclosureCandidate] | EnclosureCandidate:
    """Classify a payload that may be a single value or a list of values."""
    if isinstance(payload, list | tuple):
        return [classify_enclosure(item) for item in payload]
    return classify_enclosure(payload)
