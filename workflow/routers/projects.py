from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from .. import schemas
from ..database import get_db
from ..responses import success_response
from ..services.project_service import ProjectService

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])

@router.get("")
async def read_projects(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """**List Projects** (newest first)."""
    projects = await ProjectService.list_projects(db, limit=limit, offset=offset)
    data = [schemas.ProjectResponse.model_validate(project) for project in projects]
    return success_response(data, "Projects retrieved successfully")

@router.post("", status_code=201)
async def create_project(
    project: schemas.ProjectCreate,
    db: AsyncSession = Depends(get_db),
):
    """**Create Project**"""
    db_project = await ProjectService.create_project(db, project)
    return success_response(
        schemas.ProjectResponse.model_validate(db_project),
        "Project created successfully",
        201,
    )

@router.get("/{project_id}")
async def read_project(project_id: str, db: AsyncSession = Depends(get_db)):
    """**Project Detail** with its tasks and task counters."""
    project = await ProjectService.get_project(db, project_id, with_tasks=True)
    return success_response(
        schemas.ProjectDetailResponse.model_validate(project),
        "Project retrieved successfully",
    )

@router.get("/{project_id}/tasks")
async def read_project_tasks(
    project_id: str,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assignee: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """**Project Tasks**, optionally filtered by status, priority or assignee name."""
    tasks = await ProjectService.list_project_tasks(
        db, project_id, status=status, priority=priority, assignee=assignee,
    )
    data = [schemas.TaskResponse.model_validate(task) for task in tasks]
    return success_response(data, "Project tasks retrieved successfully")

@router.get("/{project_id}/stats")
async def read_project_stats(project_id: str, db: AsyncSession = Depends(get_db)):
    """**Project Statistics**"""
    stats = await ProjectService.get_stats(db, project_id)
    return success_response(stats, "Project statistics retrieved successfully")

@router.put("/{project_id}")
async def update_project(
    project_id: str,
    project: schemas.ProjectUpdate,
    db: AsyncSession = Depends(get_db),
):
    """**Update Project** (partial)."""
    db_project = await ProjectService.update_project(db, project_id, project)
    return success_response(
        schemas.ProjectResponse.model_validate(db_project),
        "Project updated successfully",
    )

@router.put("/{project_id}/progress")
async def recalculate_project_progress(project_id: str, db: AsyncSession = Depends(get_db)):
    """
    **Recalculate Progress**
    
    Recomputes the progress from the current task set and stores it.
    """
    progress = await ProjectService.recalculate_progress(db, project_id)
    return success_response(
        schemas.ProgressResult(progress=progress),
        "Project progress updated successfully",
    )

@router.delete("/{project_id}")
async def delete_project(project_id: str, db: AsyncSession = Depends(get_db)):
    """**Delete Project** and all of its tasks."""
    await ProjectService.delete_project(db, project_id)
    return success_response(None, "Project deleted successfully")
