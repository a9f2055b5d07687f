"""
GraphQL surface mounted at /graphql.

Each root field opens its own session from the factory placed in the
context, so sibling root fields can run concurrently without sharing one.
"""
from typing import List, Optional

import strawberry
from fastapi import Depends
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from .. import schemas
from ..database import get_session_factory
from ..services.dashboard_service import DashboardService
from ..services.project_service import ProjectService
from ..services.task_service import TaskService
from ..validation import validate_payload
from .errors import ErrorCodeExtension
from .inputs import ProjectInput, ProjectUpdateInput, TaskInput, TaskUpdateInput, to_payload
from .types import (
    DashboardStats,
    Priority,
    Project,
    ProjectStatus,
    Task,
    TaskStatus,
    project_from_model,
    task_from_model,
)

DEFAULT_LIMIT = 50


def session(info: Info):
    return info.context["session_factory"]()


def _value(enum_member):
    return enum_member.value if enum_member is not None else None


@strawberry.type
class Query:

    @strawberry.field
    async def projects(
        self,
        info: Info,
        status: Optional[ProjectStatus] = None,
        limit: Optional[int] = DEFAULT_LIMIT,
        offset: Optional[int] = 0,
        sort_by: Optional[str] = "createdAt",
        sort_order: Optional[str] = "desc",
    ) -> List[Project]:
        async with session(info) as db:
            projects = await ProjectService.list_projects(
                db, status=_value(status), limit=limit, offset=offset,
                sort_by=sort_by or "createdAt", sort_order=sort_order or "desc",
                with_tasks=True,
            )
            return [project_from_model(project) for project in projects]

    @strawberry.field
    async def project(self, info: Info, id: strawberry.ID) -> Optional[Project]:
        async with session(info) as db:
            project = await ProjectService.get_project(db, id, with_tasks=True)
            return project_from_model(project)

    @strawberry.field
    async def project_by_status(self, info: Info, status: ProjectStatus) -> List[Project]:
        async with session(info) as db:
            projects = await ProjectService.list_projects(db, status=status.value, with_tasks=True)
            return [project_from_model(project) for project in projects]

    @strawberry.field
    async def tasks(
        self,
        info: Info,
        project_id: Optional[strawberry.ID] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[Priority] = None,
        assignee: Optional[str] = None,
        limit: Optional[int] = DEFAULT_LIMIT,
        offset: Optional[int] = 0,
        sort_by: Optional[str] = "createdAt",
        sort_order: Optional[str] = "desc",
    ) -> List[Task]:
        async with session(info) as db:
            tasks = await TaskService.list_tasks(
                db, project_id=project_id, status=_value(status), priority=_value(priority),
                assignee_contains=assignee, limit=limit, offset=offset,
                sort_by=sort_by or "createdAt", sort_order=sort_order or "desc",
            )
            return [task_from_model(task) for task in tasks]

    @strawberry.field
    async def task(self, info: Info, id: strawberry.ID) -> Optional[Task]:
        async with session(info) as db:
            return task_from_model(await TaskService.get_task(db, id))

    @strawberry.field
    async def tasks_by_project(self, info: Info, project_id: strawberry.ID) -> List[Task]:
        async with session(info) as db:
            tasks = await TaskService.list_tasks(db, project_id=project_id)
            return [task_from_model(task) for task in tasks]

    @strawberry.field
    async def tasks_by_assignee(self, info: Info, assignee: str) -> List[Task]:
        async with session(info) as db:
            tasks = await TaskService.list_tasks(db, assignee_contains=assignee)
            return [task_from_model(task) for task in tasks]

    @strawberry.field
    async def dashboard_stats(self, info: Info) -> DashboardStats:
        async with session(info) as db:
            return DashboardStats.from_schema(await DashboardService.get_stats(db))


@strawberry.type
class Mutation:

    @strawberry.mutation
    async def create_project(self, info: Info, input: ProjectInput) -> Project:
        data = validate_payload(schemas.ProjectCreate, to_payload(input))
        async with session(info) as db:
            project = await ProjectService.create_project(db, data)
            project = await ProjectService.get_project(db, project.id, with_tasks=True)
            return project_from_model(project)

    @strawberry.mutation
    async def update_project(self, info: Info, id: strawberry.ID, input: ProjectUpdateInput) -> Project:
        data = validate_payload(schemas.ProjectUpdate, to_payload(input))
        async with session(info) as db:
            await ProjectService.update_project(db, id, data)
            project = await ProjectService.get_project(db, id, with_tasks=True)
            return project_from_model(project)

    @strawberry.mutation
    async def delete_project(self, info: Info, id: strawberry.ID) -> bool:
        async with session(info) as db:
            await ProjectService.delete_project(db, id)
            return True

    @strawberry.mutation
    async def create_task(self, info: Info, input: TaskInput) -> Task:
        data = validate_payload(schemas.TaskCreate, to_payload(input))
        async with session(info) as db:
            return task_from_model(await TaskService.create_task(db, data))

    @strawberry.mutation
    async def update_task(self, info: Info, id: strawberry.ID, input: TaskUpdateInput) -> Task:
        data = validate_payload(schemas.TaskUpdate, to_payload(input))
        async with session(info) as db:
            return task_from_model(await TaskService.update_task(db, id, data))

    @strawberry.mutation
    async def delete_task(self, info: Info, id: strawberry.ID) -> bool:
        async with session(info) as db:
            await TaskService.delete_task(db, id)
            return True

    @strawberry.mutation
    async def bulk_update_task_status(
        self,
        info: Info,
        task_ids: List[strawberry.ID],
        status: TaskStatus,
    ) -> List[Task]:
        async with session(info) as db:
            tasks = await TaskService.bulk_update_status(db, list(task_ids), status.value)
            return [task_from_model(task) for task in tasks]


schema = strawberry.Schema(query=Query, mutation=Mutation, extensions=[ErrorCodeExtension])


async def get_context(session_factory=Depends(get_session_factory)):
    return {"session_factory": session_factory}


graphql_app = GraphQLRouter(schema, context_getter=get_context)
