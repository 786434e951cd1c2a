"""
PageRepository for database operations on Page model
"""

import logging
from datetime import timedelta
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete

from database_models import Page
from errors import ConstraintError
from utils.shared_utils import utcnow

logger = logging.getLogger(__name__)


class PageRepository:
    """
    Repository class for Page database operations.

    Slug uniqueness is enforced by the unique index on `pages.slug`;
    a collision surfaces here as ConstraintError("slug").
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all_pages(self) -> list[Page]:
        result = await self.db.execute(
            select(Page).order_by(Page.created_at, Page.id)
        )
        return list(result.scalars().all())

    async def get_page(self, page_id: str) -> Optional[Page]:
        result = await self.db.execute(
            select(Page).where(Page.id == page_id)
        )
        return result.scalar_one_or_none()

    async def get_page_by_slug(self, slug: str) -> Optional[Page]:
        result = await self.db.execute(
            select(Page).where(Page.slug == slug)
        )
        return result.scalar_one_or_none()

    async def create_page(self, page_data: dict) -> Page:
        """
        Create a new page.

        Args:
            page_data: Dictionary with title, slug, content and
                optionally published (defaults to True)

        Returns:
            Created Page object

        Raises:
            ConstraintError: If another page already uses the slug
        """
        now = utcnow()
        page = Page(
            title=page_data["title"],
            slug=page_data["slug"],
            content=page_data["content"],
            published=page_data.get("published", True),
            created_at=now,
            updated_at=now,
        )
        self.db.add(page)
        await self._commit_or_raise(page_data["slug"])
        await self.db.refresh(page)
        return page

    async def update_page(self, page_id: str, updates: dict) -> Optional[Page]:
        """
        Apply a partial update and advance updated_at.

        Returns:
            Updated Page object, or None if no page has that ID

        Raises:
            ConstraintError: If the new slug belongs to another page
        """
        page = await self.get_page(page_id)
        if page is None:
            return None

        for key, value in updates.items():
            if key in ("id", "created_at", "updated_at"):
                continue
            if hasattr(page, key):
                setattr(page, key, value)

        # updated_at must move forward even when two writes share a clock tick
        now = utcnow()
        previous = page.updated_at
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        page.updated_at = now

        await self._commit_or_raise(updates.get("slug", page.slug))
        await self.db.refresh(page)
        return page

    async def delete_page(self, page_id: str) -> bool:
        result = await self.db.execute(
            delete(Page).where(Page.id == page_id)
        )
        await self.db.commit()
        return (result.rowcount or 0) > 0

    async def _commit_or_raise(self, slug: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"Slug collision on '{slug}': {e.orig}")
            raise ConstraintError("slug", f"Slug '{slug}' is already in use") from e
