from typing import Optional

from pydantic import field_validator

from models.common import CamelModel, UtcDatetime, check_http_url, require_text


def _clean_images(images: list[str]) -> list[str]:
    # Blank rows from the admin form are dropped before validation
    urls = [check_http_url(url) for url in images if url and url.strip()]
    if not urls:
        raise ValueError("At least one image URL is required")
    return urls


class ProjectCreate(CamelModel):
    title: str
    description: str
    markdown: str
    images: list[str]

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        return require_text(v, "Title")

    @field_validator("description")
    @classmethod
    def description_required(cls, v: str) -> str:
        return require_text(v, "Description")

    @field_validator("images")
    @classmethod
    def images_required(cls, v: list[str]) -> list[str]:
        return _clean_images(v)


class ProjectUpdate(CamelModel):
    """Partial update: only supplied fields are validated and applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    markdown: Optional[str] = None
    images: Optional[list[str]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else require_text(v, "Title")

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else require_text(v, "Description")

    @field_validator("images")
    @classmethod
    def images_not_empty(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return None if v is None else _clean_images(v)

    def changes(self) -> dict:
        # Explicit nulls count as "not supplied"
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProjectRead(CamelModel):
    id: str
    title: str
    description: str
    markdown: str
    images: list[str]
    created_at: UtcDatetime
