import re
from typing import Optional

from pydantic import field_validator

from models.common import CamelModel, UtcDatetime, require_body, require_text

# Lowercase words joined by single hyphens, as produced by the admin slug generator
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def validate_slug(slug: str) -> str:
    slug = require_text(slug, "Slug")
    if not SLUG_PATTERN.match(slug):
        raise ValueError("Slug may only contain lowercase letters, digits and single hyphens")
    return slug


class PageCreate(CamelModel):
    title: str
    slug: str
    content: str
    published: bool = True

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        return require_text(v, "Title")

    @field_validator("slug")
    @classmethod
    def slug_valid(cls, v: str) -> str:
        return validate_slug(v)

    @field_validator("content")
    @classmethod
    def content_required(cls, v: str) -> str:
        return require_body(v, "Content")


class PageUpdate(CamelModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    published: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else require_text(v, "Title")

    @field_validator("slug")
    @classmethod
    def slug_valid(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else validate_slug(v)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else require_body(v, "Content")

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class PageRead(CamelModel):
    id: str
    title: str
    slug: str
    content: str
    published: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime
