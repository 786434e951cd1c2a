"""
ProjectRepository for database operations on Project model
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from database_models import Project


class ProjectRepository:
    """
    Repository class for Project database operations.
    Encapsulates all database logic for the Project model.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: AsyncSession instance for database operations
        """
        self.db = db

    async def get_all_projects(self) -> list[Project]:
        """
        Retrieve every project, oldest first.

        Returns:
            List of Project objects ordered by created_at ascending
        """
        result = await self.db.execute(
            select(Project).order_by(Project.created_at, Project.id)
        )
        return list(result.scalars().all())

    async def get_project(self, project_id: str) -> Optional[Project]:
        """
        Retrieve a project by ID.

        Args:
            project_id: Project's ID

        Returns:
            Project object if found, None otherwise
        """
        result = await self.db.execute(
            select(Project).where(Project.id == project_id)
        )
        return result.scalar_one_or_none()

    async def create_project(self, project_data: dict) -> Project:
        """
        Create a new project in the database.

        Args:
            project_data: Dictionary containing project data. Must include:
                - title: str
                - markdown: str
                Optional:
                - description: str (defaults to "")
                - images: list[str] (defaults to [])

        Returns:
            Created Project object with generated id and created_at
        """
        project = Project(
            title=project_data["title"],
            description=project_data.get("description") or "",
            markdown=project_data["markdown"],
            images=list(project_data.get("images") or []),
        )
        self.db.add(project)
        await self.db.commit()
        await self.db.refresh(project)
        return project

    async def update_project(self, project_id: str, updates: dict) -> Optional[Project]:
        """
        Apply a partial update. Only keys present in `updates` change;
        id and created_at are never touched.

        Returns:
            Updated Project object, or None if no project has that ID
        """
        project = await self.get_project(project_id)
        if project is None:
            return None

        for key, value in updates.items():
            if key in ("id", "created_at"):
                continue
            if hasattr(project, key):
                setattr(project, key, list(value) if key == "images" else value)

        await self.db.commit()
        await self.db.refresh(project)
        return project

    async def delete_project(self, project_id: str) -> bool:
        """
        Delete a project by ID.

        Returns:
            True if a row was removed, False if none existed
        """
        result = await self.db.execute(
            delete(Project).where(Project.id == project_id)
        )
        await self.db.commit()
        return (result.rowcount or 0) > 0
