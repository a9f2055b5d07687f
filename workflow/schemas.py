from pydantic import BaseModel, ConfigDict, Field, field_validator, computed_field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError
from typing import List, Optional
from datetime import datetime, timezone

from .models import ProjectStatus, TaskStatus, Priority
from .services.progress_engine import as_utc, days_remaining, completion_percentage

# --- BASES ---

class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class InputModel(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True, validate_default=True)

def ensure_future(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    value = as_utc(value)
    if value <= datetime.now(timezone.utc):
        raise PydanticCustomError("workflow_due_date", "Due date must be in the future")
    return value

def clean_tags(value: Optional[List[str]]) -> Optional[List[str]]:
    """Trim, drop blanks and keep the first occurrence of each tag."""
    if value is None:
        return None
    seen = []
    for tag in value:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen

# --- TEAM ---

class TeamMember(InputModel):
    name: str = Field(..., min_length=1)
    avatar: Optional[str] = None

# --- PROJECTS (input) ---

class ProjectCreate(InputModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    status: ProjectStatus = ProjectStatus.planning
    progress: int = Field(0, ge=0, le=100)
    team: List[TeamMember] = Field(default_factory=list)
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, value):
        return ensure_future(value)

class ProjectUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    team: Optional[List[TeamMember]] = None
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, value):
        return ensure_future(value)

# --- TASKS (input) ---

class TaskCreate(InputModel):
    # Defaults to None so a missing title reaches require_title
    title: str = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    status: TaskStatus = TaskStatus.todo
    priority: Priority = Priority.medium
    assignee: TeamMember
    project_id: str = Field(..., min_length=1)
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    actual_hours: float = Field(0, ge=0)
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def require_title(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("workflow_required", "Task title is required")
        return value

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, value):
        return ensure_future(value)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value):
        return clean_tags(value)

class TaskUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    assignee: Optional[TeamMember] = None
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    actual_hours: Optional[float] = Field(None, ge=0)
    tags: Optional[List[str]] = None

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, value):
        return ensure_future(value)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value):
        return clean_tags(value)

class TaskStatusUpdate(BaseModel):
    # Checked by TaskService so the error reads like the other status errors
    status: Optional[str] = None

# --- RESPONSES ---

class ProjectSummary(CamelModel):
    id: str
    title: str
    status: ProjectStatus
    progress: int
    model_config = ConfigDict(from_attributes=True)

class ProjectResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    status: ProjectStatus
    progress: int
    team: List[TeamMember] = []
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value):
        return as_utc(value)

    @computed_field(alias="daysRemaining")
    @property
    def days_remaining(self) -> Optional[int]:
        return days_remaining(self.due_date)

class TaskResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: Priority
    assignee: TeamMember
    project_id: str
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = None
    actual_hours: float = 0
    tags: List[str] = []
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value):
        return as_utc(value)

    @computed_field(alias="daysRemaining")
    @property
    def days_remaining(self) -> Optional[int]:
        return days_remaining(self.due_date)

    @computed_field(alias="completionPercentage")
    @property
    def completion_percentage(self) -> int:
        return completion_percentage(self.status.value)

class TaskWithProjectResponse(TaskResponse):
    project: Optional[ProjectSummary] = None

class ProjectDetailResponse(ProjectResponse):
    tasks: List[TaskResponse] = []

    @computed_field(alias="taskCount")
    @property
    def task_count(self) -> int:
        return len(self.tasks)

    @computed_field(alias="completedTaskCount")
    @property
    def completed_task_count(self) -> int:
        return sum(1 for task in self.tasks if task.status == TaskStatus.done)

# --- STATISTICS ---

class ProjectStats(CamelModel):
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    progress: int
    days_remaining: Optional[int] = None
    status: ProjectStatus
    team_size: int

class TaskStats(CamelModel):
    total_tasks: int = 0
    todo_tasks: int = 0
    in_progress_tasks: int = 0
    completed_tasks: int = 0
    high_priority_tasks: int = 0

class ProgressResult(CamelModel):
    progress: int

class StatusCount(CamelModel):
    status: str
    count: int

class PriorityCount(CamelModel):
    priority: str
    count: int

class DashboardStats(CamelModel):
    total_projects: int
    total_tasks: int
    completed_tasks: int
    active_projects: int
    overdue_tasks: int
    projects_by_status: List[StatusCount]
    tasks_by_status: List[StatusCount]
    tasks_by_priority: List[PriorityCount]
