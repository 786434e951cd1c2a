"""
Projects Router - public project listing and admin CRUD
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth import require_admin
from crud.project import ProjectRepository
from database import get_db
from errors import NotFoundError
from models.admin import MessageResponse
from models.project import ProjectCreate, ProjectRead, ProjectUpdate
from utils.shared_utils import run_store_call

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[ProjectRead])
async def list_projects(db: AsyncSession = Depends(get_db)):
    """All projects, oldest first."""
    repo = ProjectRepository(db)
    return await run_store_call(repo.get_all_projects, "Failed to fetch projects")


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(project_id: str, db: AsyncSession = Depends(get_db)):
    repo = ProjectRepository(db)
    project = await run_store_call(
        lambda: repo.get_project(project_id), "Failed to fetch project"
    )
    if project is None:
        raise NotFoundError("Project not found")
    return project


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_project(payload: ProjectCreate, db: AsyncSession = Depends(get_db)):
    repo = ProjectRepository(db)
    project = await run_store_call(
        lambda: repo.create_project(payload.model_dump()), "Failed to create project"
    )
    logger.info(f"Created project {project.id} ('{project.title}')")
    return project


@router.put(
    "/{project_id}",
    response_model=ProjectRead,
    dependencies=[Depends(require_admin)],
)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partial update: fields missing from the body keep their values."""
    repo = ProjectRepository(db)
    project = await run_store_call(
        lambda: repo.update_project(project_id, payload.changes()), "Failed to update project"
    )
    if project is None:
        raise NotFoundError("Project not found")
    return project


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_project(project_id: str, db: AsyncSession = Depends(get_db)):
    repo = ProjectRepository(db)
    deleted = await run_store_call(
        lambda: repo.delete_project(project_id), "Failed to delete project"
    )
    if not deleted:
        raise NotFoundError("Project not found")
    logger.info(f"Deleted project {project_id}")
    return {"message": "Project deleted successfully"}
