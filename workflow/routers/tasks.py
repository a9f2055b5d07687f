from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from .. import schemas
from ..database import get_db
from ..responses import success_response
from ..services.project_service import ProjectService
from ..services.task_service import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])

@router.get("")
async def read_tasks(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assignee: Optional[str] = None,
    project_id: Optional[str] = Query(None, alias="projectId"),
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """**List Tasks** with optional filters."""
    tasks = await TaskService.list_tasks(
        db, project_id=project_id, status=status, priority=priority,
        assignee=assignee, limit=limit, offset=offset,
    )
    data = [schemas.TaskWithProjectResponse.model_validate(task) for task in tasks]
    return success_response(data, "Tasks retrieved successfully")

@router.get("/stats")
async def read_task_stats(db: AsyncSession = Depends(get_db)):
    """**Task Statistics** across every project."""
    stats = await TaskService.get_stats(db)
    return success_response(stats, "Task statistics retrieved successfully")

@router.get("/project/{project_id}")
async def read_tasks_by_project(
    project_id: str,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assignee: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """**Tasks of a Project**"""
    tasks = await ProjectService.list_project_tasks(
        db, project_id, status=status, priority=priority, assignee=assignee,
    )
    data = [schemas.TaskWithProjectResponse.model_validate(task) for task in tasks]
    return success_response(data, "Project tasks retrieved successfully")

@router.get("/{task_id}")
async def read_task(task_id: str, db: AsyncSession = Depends(get_db)):
    """**Task Detail**"""
    task = await TaskService.get_task(db, task_id)
    return success_response(
        schemas.TaskWithProjectResponse.model_validate(task),
        "Task retrieved successfully",
    )

@router.post("", status_code=201)
async def create_task(task: schemas.TaskCreate, db: AsyncSession = Depends(get_db)):
    """
    **Create Task**
    
    The project must exist; its progress is recalculated afterwards.
    """
    db_task = await TaskService.create_task(db, task)
    return success_response(
        schemas.TaskWithProjectResponse.model_validate(db_task),
        "Task created successfully",
        201,
    )

@router.put("/{task_id}")
async def update_task(
    task_id: str,
    task: schemas.TaskUpdate,
    db: AsyncSession = Depends(get_db),
):
    """**Update Task** (partial)."""
    db_task = await TaskService.update_task(db, task_id, task)
    return success_response(
        schemas.TaskWithProjectResponse.model_validate(db_task),
        "Task updated successfully",
    )

@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: str,
    payload: Optional[schemas.TaskStatusUpdate] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    **Move Task**
    
    Body: `{"status": "todo" | "in-progress" | "done"}`.
    """
    status = payload.status if payload else None
    db_task = await TaskService.update_status(db, task_id, status)
    return success_response(
        schemas.TaskWithProjectResponse.model_validate(db_task),
        "Task status updated successfully",
    )

@router.delete("/{task_id}")
async def delete_task(task_id: str, db: AsyncSession = Depends(get_db)):
    """**Delete Task**"""
    await TaskService.delete_task(db, task_id)
    return success_response(None, "Task deleted successfully")
