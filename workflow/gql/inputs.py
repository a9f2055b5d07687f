import dataclasses
from datetime import datetime
from typing import Any, List, Optional

import strawberry

from .types import ProjectStatus, TaskStatus, Priority


@strawberry.input
class TeamMemberInput:
    name: str
    avatar: Optional[str] = strawberry.UNSET


@strawberry.input
class ProjectInput:
    title: str
    description: Optional[str] = strawberry.UNSET
    status: Optional[ProjectStatus] = strawberry.UNSET
    progress: Optional[int] = strawberry.UNSET
    team: Optional[List[TeamMemberInput]] = strawberry.UNSET
    due_date: Optional[datetime] = strawberry.UNSET


@strawberry.input
class ProjectUpdateInput:
    title: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    status: Optional[ProjectStatus] = strawberry.UNSET
    progress: Optional[int] = strawberry.UNSET
    team: Optional[List[TeamMemberInput]] = strawberry.UNSET
    due_date: Optional[datetime] = strawberry.UNSET


@strawberry.input
class TaskInput:
    title: str
    assignee: TeamMemberInput
    project_id: strawberry.ID
    description: Optional[str] = strawberry.UNSET
    status: Optional[TaskStatus] = strawberry.UNSET
    priority: Optional[Priority] = strawberry.UNSET
    due_date: Optional[datetime] = strawberry.UNSET
    estimated_hours: Optional[float] = strawberry.UNSET
    actual_hours: Optional[float] = strawberry.UNSET
    tags: Optional[List[str]] = strawberry.UNSET


@strawberry.input
class TaskUpdateInput:
    title: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    status: Optional[TaskStatus] = strawberry.UNSET
    priority: Optional[Priority] = strawberry.UNSET
    assignee: Optional[TeamMemberInput] = strawberry.UNSET
    due_date: Optional[datetime] = strawberry.UNSET
    estimated_hours: Optional[float] = strawberry.UNSET
    actual_hours: Optional[float] = strawberry.UNSET
    tags: Optional[List[str]] = strawberry.UNSET


def to_payload(value: Any) -> Any:
    """Input object -> plain dict. Omitted and null fields are both left out."""
    if dataclasses.is_dataclass(value):
        payload = {}
        for field in dataclasses.fields(value):
            item = getattr(value, field.name)
            if item is strawberry.UNSET or item is None:
                continue
            payload[field.name] = to_payload(item)
        return payload
    if isinstance(value, list):
        return [to_payload(item) for item in value]
    return value
