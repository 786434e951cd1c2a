"""
Settings Router - site settings and the résumé link
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import require_admin
from crud.setting import SettingRepository
from database import get_db
from errors import NotFoundError
from models.setting import (
    RESUME_URL_KEY,
    ResumeRead,
    ResumeUpdate,
    ResumeUpdateResponse,
    SettingRead,
    SettingWrite,
)
from utils.shared_utils import run_store_call

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings", response_model=list[SettingRead])
async def list_settings(db: AsyncSession = Depends(get_db)):
    repo = SettingRepository(db)
    return await run_store_call(repo.get_all_settings, "Failed to fetch settings")


@router.get("/settings/{key}", response_model=SettingRead)
async def get_setting(key: str, db: AsyncSession = Depends(get_db)):
    repo = SettingRepository(db)
    setting = await run_store_call(lambda: repo.get_setting(key), "Failed to fetch setting")
    if setting is None:
        raise NotFoundError("Setting not found")
    return setting


@router.post(
    "/settings",
    response_model=SettingRead,
    dependencies=[Depends(require_admin)],
)
async def write_setting(payload: SettingWrite, db: AsyncSession = Depends(get_db)):
    """Create the setting or overwrite its value in place."""
    repo = SettingRepository(db)
    setting = await run_store_call(
        lambda: repo.set_setting(payload.key, payload.value), "Failed to update setting"
    )
    logger.info(f"Setting '{setting.key}' updated")
    return setting


@router.get("/resume", response_model=ResumeRead)
async def get_resume(db: AsyncSession = Depends(get_db)):
    repo = SettingRepository(db)
    setting = await run_store_call(
        lambda: repo.get_setting(RESUME_URL_KEY), "Failed to fetch resume URL"
    )
    return ResumeRead(resume_url=setting.value if setting else None)


@router.put(
    "/resume",
    response_model=ResumeUpdateResponse,
    dependencies=[Depends(require_admin)],
)
async def update_resume(payload: ResumeUpdate, db: AsyncSession = Depends(get_db)):
    repo = SettingRepository(db)
    await run_store_call(
        lambda: repo.set_setting(RESUME_URL_KEY, payload.resume_url), "Failed to update resume URL"
    )
    return ResumeUpdateResponse(
        message="Resume URL updated successfully",
        resume_url=payload.resume_url,
    )
