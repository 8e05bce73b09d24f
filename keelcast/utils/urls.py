"""URL helpers shared by validation and audio extraction."""

from urllib.parse import urlsplit

from pydantic import AnyUrl, TypeAdapter, ValidationError

_ANY_URL: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def is_absolute_url(value: object) -> bool:
    """
    Check whether a value is a syntactically valid absolute URL.

    Args:
        value: Candidate URL

    Returns:
        True if the value is a string carrying a scheme and parses as a URL

    Examples:
        >>> is_absolute_url("https://cdn.example.com/ep1.mp3")
        True
        >>> is_absolute_url("/ep1.mp3")
        False
    """
    if not isinstance(value, str) or not value.strip():
        return False

    try:
        _ANY_URL.validate_python(value)
    except ValidationError:
        return False

    return True


def path_and_query(url: str) -> str:
    """
    Return the lower-cased path and query of a URL.

    Falls back to the whole lower-cased string when the URL cannot be split,
    so relative or odd URLs are still inspected.
    """
    lowered = url.lower()
    try:
        parts = urlsplit(lowered)
    except ValueError:
        return lowered

    if not parts.scheme and not parts.netloc:
        return lowered

    if parts.query:
        return f"{parts.path}?{parts.query}"
    return parts.path
