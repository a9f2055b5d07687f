import enum
from typing import Type

from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud, models, schemas


def external_name(enum_cls: Type[enum.Enum], value: str) -> str:
    """'on-hold' -> 'on_hold'; unknown stored values pass through."""
    try:
        return enum_cls(value).name
    except ValueError:
        return value


class DashboardService:

    @staticmethod
    async def get_stats(db: AsyncSession) -> schemas.DashboardStats:
        """Global counters for the dashboard, aggregated on demand."""
        projects_by_status = await crud.count_projects_by_status(db)
        tasks_by_status = await crud.count_tasks_grouped(db, models.Task.status)
        tasks_by_priority = await crud.count_tasks_grouped(db, models.Task.priority)

        return schemas.DashboardStats(
            total_projects=await crud.count_projects(db),
            total_tasks=await crud.count_tasks(db),
            completed_tasks=await crud.count_tasks(db, status=models.TaskStatus.done.value),
            active_projects=await crud.count_projects(db, status=models.ProjectStatus.active.value),
            overdue_tasks=await crud.count_overdue_tasks(db),
            projects_by_status=[
                schemas.StatusCount(status=external_name(models.ProjectStatus, key), count=count)
                for key, count in projects_by_status.items()
            ],
            tasks_by_status=[
                schemas.StatusCount(status=external_name(models.TaskStatus, key), count=count)
                for key, count in tasks_by_status.items()
            ],
            tasks_by_priority=[
                schemas.PriorityCount(priority=key, count=count)
                for key, count in tasks_by_priority.items()
            ],
        )
