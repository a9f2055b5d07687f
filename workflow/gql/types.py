"""
GraphQL object types.

Enums reuse the model enums: GraphQL exposes the member names
(``on_hold``, ``in_progress``) while the database keeps the values
(``on-hold``, ``in-progress``), so translation happens in one place.
"""
from datetime import datetime
from typing import List, Optional

import strawberry

from .. import models, schemas
from ..services.progress_engine import as_utc, days_remaining, completion_percentage

ProjectStatus = strawberry.enum(models.ProjectStatus, name="ProjectStatus")
TaskStatus = strawberry.enum(models.TaskStatus, name="TaskStatus")
Priority = strawberry.enum(models.Priority, name="Priority")


@strawberry.type
class TeamMember:
    name: str
    avatar: Optional[str] = None


@strawberry.type
class Project:
    id: strawberry.ID
    title: str
    description: Optional[str]
    status: ProjectStatus
    progress: int
    team: List[TeamMember]
    due_date: Optional[datetime]
    days_remaining: Optional[int]
    task_count: Optional[int]
    completed_task_count: Optional[int]
    tasks: Optional[List["Task"]]
    created_at: datetime
    updated_at: datetime


@strawberry.type
class Task:
    id: strawberry.ID
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: Priority
    assignee: TeamMember
    project_id: strawberry.ID
    project: Optional[Project]
    due_date: Optional[datetime]
    days_remaining: Optional[int]
    estimated_hours: Optional[float]
    actual_hours: float
    tags: Optional[List[str]]
    completion_percentage: int
    created_at: datetime
    updated_at: datetime


@strawberry.type
class StatusCount:
    status: str
    count: int


@strawberry.type
class PriorityCount:
    priority: str
    count: int


@strawberry.type
class DashboardStats:
    total_projects: int
    total_tasks: int
    completed_tasks: int
    active_projects: int
    overdue_tasks: int
    projects_by_status: List[StatusCount]
    tasks_by_status: List[StatusCount]
    tasks_by_priority: List[PriorityCount]

    @classmethod
    def from_schema(cls, stats: schemas.DashboardStats) -> "DashboardStats":
        return cls(
            total_projects=stats.total_projects,
            total_tasks=stats.total_tasks,
            completed_tasks=stats.completed_tasks,
            active_projects=stats.active_projects,
            overdue_tasks=stats.overdue_tasks,
            projects_by_status=[StatusCount(status=s.status, count=s.count) for s in stats.projects_by_status],
            tasks_by_status=[StatusCount(status=s.status, count=s.count) for s in stats.tasks_by_status],
            tasks_by_priority=[PriorityCount(priority=p.priority, count=p.count) for p in stats.tasks_by_priority],
        )


# --- ORM -> GraphQL ---
# Everything is built while the resolver's session is open; relationships
# must already be eager-loaded by the crud query.

def project_from_model(project: models.Project) -> Project:
    tasks = list(project.tasks)
    result = Project(
        id=strawberry.ID(project.id),
        title=project.title,
        description=project.description,
        status=models.ProjectStatus(project.status),
        progress=project.progress,
        team=[TeamMember(name=m["name"], avatar=m.get("avatar")) for m in project.team or []],
        due_date=as_utc(project.due_date),
        days_remaining=days_remaining(project.due_date),
        task_count=len(tasks),
        completed_task_count=sum(1 for t in tasks if t.status == models.TaskStatus.done.value),
        tasks=[],
        created_at=as_utc(project.created_at),
        updated_at=as_utc(project.updated_at),
    )
    result.tasks = [task_from_model(task, parent=result) for task in tasks]
    return result


def task_from_model(task: models.Task, parent: Optional[Project] = None) -> Task:
    if parent is None and task.project is not None:
        parent = project_from_model(task.project)
    return Task(
        id=strawberry.ID(task.id),
        title=task.title,
        description=task.description,
        status=models.TaskStatus(task.status),
        priority=models.Priority(task.priority),
        assignee=TeamMember(name=task.assignee_name, avatar=task.assignee_avatar),
        project_id=strawberry.ID(task.project_id),
        project=parent,
        due_date=as_utc(task.due_date),
        days_remaining=days_remaining(task.due_date),
        estimated_hours=task.estimated_hours,
        actual_hours=task.actual_hours or 0,
        tags=list(task.tags or []),
        completion_percentage=completion_percentage(task.status),
        created_at=as_utc(task.created_at),
        updated_at=as_utc(task.updated_at),
    )
