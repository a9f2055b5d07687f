"""
Progress engine.

Single owner of the progress formula and of the other values derived from
a task set (days remaining, completion percentage). Every mutation path
(REST routers, GraphQL resolvers) calls into this module after it commits.
"""
import logging
import math
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import func, case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from .. import models

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

COMPLETION_BY_STATUS = {
    models.TaskStatus.done.value: 100,
    models.TaskStatus.in_progress.value: 50,
}


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes coming back from the database are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calculate_progress(completed: int, total: int) -> int:
    """Percentage of completed tasks, rounded half up. 0 when there are no tasks."""
    if total <= 0:
        return 0
    ratio = Decimal(completed * 100) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def days_remaining(due_date: Optional[datetime], now: Optional[datetime] = None) -> Optional[int]:
    if due_date is None:
        return None
    now = as_utc(now) or datetime.now(timezone.utc)
    delta = as_utc(due_date) - now
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def completion_percentage(status: str) -> int:
    return COMPLETION_BY_STATUS.get(status, 0)


async def count_tasks(db: AsyncSession, project_id: str):
    """Returns (total, completed) for a project."""
    query = select(
        func.count(models.Task.id),
        func.coalesce(func.sum(case((models.Task.status == models.TaskStatus.done.value, 1), else_=0)), 0),
    ).filter(models.Task.project_id == project_id)
    total, completed = (await db.execute(query)).one()
    return int(total or 0), int(completed or 0)


async def recompute_progress(db: AsyncSession, project_id: str) -> Optional[int]:
    """
    Recalculates and persists the progress of a project from its tasks.

    Returns the new progress, or None when the project does not exist
    (nothing to update, not an error).
    """
    project = await db.get(models.Project, project_id)
    if project is None:
        logger.debug("Progress recompute skipped, project %s does not exist", project_id)
        return None

    total, completed = await count_tasks(db, project_id)
    project.progress = calculate_progress(completed, total)
    await db.commit()
    await db.refresh(project)
    return project.progress


async def refresh_project_progress(db: AsyncSession, project_id: str) -> Optional[int]:
    """
    Post-mutation hook. A failure here never fails the mutation that
    triggered it: the session is rolled back and the error is logged.
    """
    try:
        return await recompute_progress(db, project_id)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to recompute progress for project %s", project_id)
        return None
