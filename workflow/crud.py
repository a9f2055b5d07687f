from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from sqlalchemy import func, case
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from . import models, schemas

PROJECT_SORT_FIELDS = {
    "createdAt": models.Project.created_at,
    "updatedAt": models.Project.updated_at,
    "title": models.Project.title,
    "dueDate": models.Project.due_date,
    "status": models.Project.status,
    "progress": models.Project.progress,
}

TASK_SORT_FIELDS = {
    "createdAt": models.Task.created_at,
    "updatedAt": models.Task.updated_at,
    "title": models.Task.title,
    "dueDate": models.Task.due_date,
    "status": models.Task.status,
    "priority": models.Task.priority,
}

def _ordering(column, sort_order: str):
    return column.asc() if sort_order == "asc" else column.desc()

def _page(query, limit: Optional[int], offset: Optional[int]):
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query

# --- PROJECTS ---

async def get_projects(
    db: AsyncSession,
    status: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
    with_tasks: bool = False,
) -> List[models.Project]:
    """Lists projects, newest first unless told otherwise."""
    query = select(models.Project)
    if status:
        query = query.filter(models.Project.status == status)
    if with_tasks:
        query = query.options(selectinload(models.Project.tasks))
    query = query.order_by(_ordering(PROJECT_SORT_FIELDS[sort_by], sort_order), models.Project.id)
    result = await db.execute(_page(query, limit, offset))
    return result.scalars().all()

async def get_project(db: AsyncSession, project_id: str, with_tasks: bool = False) -> Optional[models.Project]:
    query = select(models.Project).filter(models.Project.id == project_id)
    if with_tasks:
        query = query.options(selectinload(models.Project.tasks))
    result = await db.execute(query.execution_options(populate_existing=True))
    return result.scalars().first()

async def create_project(db: AsyncSession, project: schemas.ProjectCreate) -> models.Project:
    db_project = models.Project(**project.model_dump())
    db.add(db_project)
    await db.commit()
    await db.refresh(db_project)
    return db_project

async def update_project(
    db: AsyncSession,
    project_id: str,
    updates: schemas.ProjectUpdate,
) -> Optional[models.Project]:
    """Partial merge: only the supplied, non-null fields are written."""
    db_project = await get_project(db, project_id)
    if not db_project:
        return None

    update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in update_data.items():
        setattr(db_project, key, value)

    await db.commit()
    await db.refresh(db_project)
    return db_project

async def delete_project(db: AsyncSession, project_id: str) -> Optional[int]:
    """
    Deletes a project together with its tasks.
    Returns the number of tasks removed, or None when the project is absent.
    """
    db_project = await get_project(db, project_id, with_tasks=True)
    if not db_project:
        return None

    removed = len(db_project.tasks)
    await db.delete(db_project)
    await db.commit()
    return removed

async def count_projects(db: AsyncSession, status: Optional[str] = None) -> int:
    query = select(func.count(models.Project.id))
    if status:
        query = query.filter(models.Project.status == status)
    return (await db.execute(query)).scalar() or 0

async def count_projects_by_status(db: AsyncSession) -> Dict[str, int]:
    query = (
        select(models.Project.status, func.count(models.Project.id).label("count"))
        .group_by(models.Project.status)
        .order_by(models.Project.status)
    )
    rows = (await db.execute(query)).all()
    return {row.status: row.count for row in rows}

# --- TASKS ---

def _task_query():
    # project and its tasks are needed by the response shapes on both surfaces
    return select(models.Task).options(
        selectinload(models.Task.project).selectinload(models.Project.tasks)
    )

async def get_tasks(
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
    conditions = []
    if project_id:
        conditions.append(models.Task.project_id == project_id)
    if status:
        conditions.append(models.Task.status == status)
    if priority:
        conditions.append(models.Task.priority == priority)
    if assignee:
        conditions.append(models.Task.assignee_name == assignee)
    if assignee_contains:
        conditions.append(models.Task.assignee_name.ilike(f"%{assignee_contains}%"))

    query = (
        _task_query()
        .filter(*conditions)
        .order_by(_ordering(TASK_SORT_FIELDS[sort_by], sort_order), models.Task.id)
    )
    result = await db.execute(_page(query, limit, offset))
    return result.scalars().all()

async def get_task(db: AsyncSession, task_id: str) -> Optional[models.Task]:
    # No populate_existing: the task comes back again through Project.tasks
    # and would have its Task.project reset to unloaded.
    result = await db.execute(_task_query().filter(models.Task.id == task_id))
    return result.scalars().first()

async def create_task(db: AsyncSession, task: schemas.TaskCreate) -> models.Task:
    db_task = models.Task(**task.model_dump())
    db.add(db_task)
    await db.commit()
    await db.refresh(db_task)
    return db_task

async def update_task(
    db: AsyncSession,
    task_id: str,
    updates: Dict[str, Any],
) -> Optional[models.Task]:
    db_task = await db.get(models.Task, task_id)
    if not db_task:
        return None

    for key, value in updates.items():
        setattr(db_task, key, value)

    await db.commit()
    await db.refresh(db_task)
    return db_task

async def delete_task(db: AsyncSession, task_id: str) -> Optional[models.Task]:
    """Deletes a task and returns the removed row (None if absent)."""
    db_task = await db.get(models.Task, task_id)
    if not db_task:
        return None

    await db.delete(db_task)
    await db.commit()
    return db_task

async def get_task_stats(db: AsyncSession) -> Dict[str, int]:
    """Global counters by status plus the number of high priority tasks."""
    def count_where(condition):
        return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

    query = select(
        func.count(models.Task.id).label("total_tasks"),
        count_where(models.Task.status == models.TaskStatus.todo.value).label("todo_tasks"),
        count_where(models.Task.status == models.TaskStatus.in_progress.value).label("in_progress_tasks"),
        count_where(models.Task.status == models.TaskStatus.done.value).label("completed_tasks"),
        count_where(models.Task.priority == models.Priority.high.value).label("high_priority_tasks"),
    )
    row = (await db.execute(query)).one()
    return {key: int(value or 0) for key, value in row._mapping.items()}

async def count_tasks(db: AsyncSession, status: Optional[str] = None) -> int:
    query = select(func.count(models.Task.id))
    if status:
        query = query.filter(models.Task.status == status)
    return (await db.execute(query)).scalar() or 0

async def count_overdue_tasks(db: AsyncSession, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    query = select(func.count(models.Task.id)).filter(
        models.Task.due_date.is_not(None),
        models.Task.due_date < now,
        models.Task.status != models.TaskStatus.done.value,
    )
    return (await db.execute(query)).scalar() or 0

async def count_tasks_grouped(db: AsyncSession, column) -> Dict[str, int]:
    query = (
        select(column.label("key"), func.count(models.Task.id).label("count"))
        .group_by(column)
        .order_by(column)
    )
    rows = (await db.execute(query)).all()
    return {row.key: row.count for row in rows}
