"""
Shared pieces for request/response models: camelCase aliasing and URL checks
"""
from datetime import datetime, timezone
from typing import Annotated

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, PlainSerializer, TypeAdapter
from pydantic.alias_generators import to_camel

_http_url = TypeAdapter(AnyHttpUrl)


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys (createdAt, resumeUrl, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def require_text(value: str, label: str) -> str:
    """Strip surrounding whitespace and reject blank strings."""
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


def require_body(value: str, label: str) -> str:
    """Reject blank strings but keep the text verbatim (markdown bodies)."""
    if not value.strip():
        raise ValueError(f"{label} is required")
    return value


def check_http_url(value: str) -> str:
    """
    Validate an http(s) URL and return the original string unchanged.
    Raises ValueError for anything else.
    """
    value = value.strip()
    try:
        _http_url.validate_python(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid URL")
    return value


def _as_utc_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="microseconds")


# Stored timestamps are naive UTC; emit them with an explicit offset
UtcDatetime = Annotated[datetime, PlainSerializer(_as_utc_iso, return_type=str)]
