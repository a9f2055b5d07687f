import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud, models, schemas
from ..errors import InternalError, NotFoundError, ValidationError
from . import progress_engine

logger = logging.getLogger(__name__)


def check_sort(sort_by: str, sort_order: str, allowed) -> None:
    errors = []
    if sort_by not in allowed:
        errors.append(f"sortBy must be one of {', '.join(sorted(allowed))}")
    if sort_order not in ("asc", "desc"):
        errors.append("sortOrder must be asc or desc")
    if errors:
        raise ValidationError(errors=errors)


def check_page(limit: Optional[int], offset: Optional[int]) -> None:
    errors = []
    if limit is not None and limit < 1:
        errors.append("Limit cannot be less than 1")
    if offset is not None and offset < 0:
        errors.append("Offset cannot be less than 0")
    if errors:
        raise ValidationError(errors=errors)


class ProjectService:

    @staticmethod
    async def list_projects(
        db: AsyncSession,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        with_tasks: bool = False,
    ) -> List[models.Project]:
        check_sort(sort_by, sort_order, crud.PROJECT_SORT_FIELDS)
        check_page(limit, offset)
        return await crud.get_projects(
            db, status=status, limit=limit, offset=offset,
            sort_by=sort_by, sort_order=sort_order, with_tasks=with_tasks,
        )

    @staticmethod
    async def get_project(db: AsyncSession, project_id: str, with_tasks: bool = False) -> models.Project:
        project = await crud.get_project(db, project_id, with_tasks=with_tasks)
        if not project:
            raise NotFoundError("Project")
        return project

    @staticmethod
    async def create_project(db: AsyncSession, data: schemas.ProjectCreate) -> models.Project:
        project = await crud.create_project(db, data)
        logger.info("Project %s created", project.id)
        return project

    @staticmethod
    async def update_project(db: AsyncSession, project_id: str, data: schemas.ProjectUpdate) -> models.Project:
        project = await crud.update_project(db, project_id, data)
        if not project:
            raise NotFoundError("Project")
        return project

    @staticmethod
    async def delete_project(db: AsyncSession, project_id: str) -> None:
        """Cascades: the project's tasks are deleted with it."""
        removed = await crud.delete_project(db, project_id)
        if removed is None:
            raise NotFoundError("Project")
        logger.info("Project %s deleted with %d task(s)", project_id, removed)

    @staticmethod
    async def list_project_tasks(
        db: AsyncSession,
        project_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assignee: Optional[str] = None,
    ) -> List[models.Task]:
        await ProjectService.get_project(db, project_id)
        return await crud.get_tasks(
            db, project_id=project_id, status=status, priority=priority, assignee=assignee,
        )

    @staticmethod
    async def get_stats(db: AsyncSession, project_id: str) -> schemas.ProjectStats:
        project = await ProjectService.get_project(db, project_id)
        total, completed = await progress_engine.count_tasks(db, project_id)
        return schemas.ProjectStats(
            total_tasks=total,
            completed_tasks=completed,
            pending_tasks=total - completed,
            progress=project.progress,
            days_remaining=progress_engine.days_remaining(project.due_date),
            status=project.status,
            team_size=len(project.team or []),
        )

    @staticmethod
    async def recalculate_progress(db: AsyncSession, project_id: str) -> int:
        """Explicit recompute request; unlike the post-mutation hook it reports failures."""
        await ProjectService.get_project(db, project_id)
        try:
            progress = await progress_engine.recompute_progress(db, project_id)
        except SQLAlchemyError as exc:
            await db.rollback()
            raise InternalError(f"progress recompute failed for project {project_id}: {exc}") from exc
        if progress is None:
            # deleted between the lookup and the recompute
            raise NotFoundError("Project")
        return progress
