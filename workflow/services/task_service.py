import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud, models, schemas
from ..errors import NotFoundError, ProjectReferenceError, ValidationError
from . import progress_engine
from .project_service import check_page, check_sort

logger = logging.getLogger(__name__)

VALID_STATUSES = [status.value for status in models.TaskStatus]
INVALID_STATUS_MESSAGE = "Invalid status. Must be todo, in-progress, or done"


class TaskService:

    @staticmethod
    async def list_tasks(
        db: AsyncSession,
        project_id: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assignee: Optional[str] = None,
        assignee_contains: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> List[models.Task]:
        check_sort(sort_by, sort_order, crud.TASK_SORT_FIELDS)
        check_page(limit, offset)
        return await crud.get_tasks(
            db, project_id=project_id, status=status, priority=priority,
            assignee=assignee, assignee_contains=assignee_contains,
            limit=limit, offset=offset, sort_by=sort_by, sort_order=sort_order,
        )

    @staticmethod
    async def get_task(db: AsyncSession, task_id: str) -> models.Task:
        task = await crud.get_task(db, task_id)
        if not task:
            raise NotFoundError("Task")
        return task

    @staticmethod
    async def create_task(db: AsyncSession, data: schemas.TaskCreate) -> models.Task:
        # The reference is only checked here, not kept in sync afterwards
        if not await crud.get_project(db, data.project_id):
            raise ProjectReferenceError()

        task = await crud.create_task(db, data)
        await progress_engine.refresh_project_progress(db, task.project_id)
        return await TaskService.get_task(db, task.id)

    @staticmethod
    async def update_task(db: AsyncSession, task_id: str, data: schemas.TaskUpdate) -> models.Task:
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        task = await crud.update_task(db, task_id, updates)
        if not task:
            raise NotFoundError("Task")

        if "status" in updates:
            await progress_engine.refresh_project_progress(db, task.project_id)
        return await TaskService.get_task(db, task.id)

    @staticmethod
    async def update_status(db: AsyncSession, task_id: str, status: Optional[str]) -> models.Task:
        if status not in VALID_STATUSES:
            raise ValidationError(INVALID_STATUS_MESSAGE)

        task = await crud.update_task(db, task_id, {"status": status})
        if not task:
            raise NotFoundError("Task")

        await progress_engine.refresh_project_progress(db, task.project_id)
        return await TaskService.get_task(db, task.id)

    @staticmethod
    async def bulk_update_status(db: AsyncSession, task_ids: List[str], status: str) -> List[models.Task]:
        """
        Applies the status to each id on its own. Unknown ids are skipped;
        earlier updates stay committed whatever happens to later ones.
        """
        updated = []
        for task_id in task_ids:
            try:
                updated.append(await TaskService.update_status(db, task_id, status))
            except NotFoundError:
                logger.info("Bulk status update skipped unknown task %s", task_id)
        return updated

    @staticmethod
    async def delete_task(db: AsyncSession, task_id: str) -> None:
        task = await crud.delete_task(db, task_id)
        if not task:
            raise NotFoundError("Task")
        await progress_engine.refresh_project_progress(db, task.project_id)

    @staticmethod
    async def get_stats(db: AsyncSession) -> schemas.TaskStats:
        return schemas.TaskStats(**await crud.get_task_stats(db))
