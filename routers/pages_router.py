"""
Pages Router - static content pages

Pages are listed and fetched by id without authentication. The public
slug route only serves published pages; drafts read as 404 there.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth import require_admin
from crud.page import PageRepository
from database import get_db
from errors import ConstraintError, NotFoundError, ValidationError
from models.admin import MessageResponse
from models.page import PageCreate, PageRead, PageUpdate
from utils.shared_utils import run_store_call

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["pages"])


def _slug_in_use(error: ConstraintError) -> ValidationError:
    return ValidationError(
        "Slug already in use",
        errors=[{"field": "slug", "message": error.message}],
    )


@router.get("/pages", response_model=list[PageRead])
async def list_pages(db: AsyncSession = Depends(get_db)):
    repo = PageRepository(db)
    return await run_store_call(repo.get_all_pages, "Failed to fetch pages")


@router.get("/pages/{page_id}", response_model=PageRead)
async def get_page(page_id: str, db: AsyncSession = Depends(get_db)):
    repo = PageRepository(db)
    page = await run_store_call(lambda: repo.get_page(page_id), "Failed to fetch page")
    if page is None:
        raise NotFoundError("Page not found")
    return page


@router.get("/page/{slug}", response_model=PageRead)
async def get_published_page(slug: str, db: AsyncSession = Depends(get_db)):
    """Public lookup by slug. Unpublished pages are reported as missing."""
    repo = PageRepository(db)
    page = await run_store_call(lambda: repo.get_page_by_slug(slug), "Failed to fetch page")
    if page is None or not page.published:
        raise NotFoundError("Page not found")
    return page


@router.post(
    "/pages",
    response_model=PageRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_page(payload: PageCreate, db: AsyncSession = Depends(get_db)):
    repo = PageRepository(db)
    try:
        page = await run_store_call(
            lambda: repo.create_page(payload.model_dump()), "Failed to create page"
        )
    except ConstraintError as e:
        raise _slug_in_use(e) from e
    logger.info(f"Created page {page.id} at /{page.slug}")
    return page


@router.put(
    "/pages/{page_id}",
    response_model=PageRead,
    dependencies=[Depends(require_admin)],
)
async def update_page(
    page_id: str,
    payload: PageUpdate,
    db: AsyncSession = Depends(get_db),
):
    repo = PageRepository(db)
    try:
        page = await run_store_call(
            lambda: repo.update_page(page_id, payload.changes()), "Failed to update page"
        )
    except ConstraintError as e:
        raise _slug_in_use(e) from e
    if page is None:
        raise NotFoundError("Page not found")
    return page


@router.delete(
    "/pages/{page_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_page(page_id: str, db: AsyncSession = Depends(get_db)):
    repo = PageRepository(db)
    deleted = await run_store_call(lambda: repo.delete_page(page_id), "Failed to delete page")
    if not deleted:
        raise NotFoundError("Page not found")
    logger.info(f"Deleted page {page_id}")
    return {"message": "Page deleted successfully"}
