import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Float, JSON, Index
from sqlalchemy.orm import relationship
from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def new_id() -> str:
    return str(uuid.uuid4())

# --- ENUMS ---
# Member names are the external (GraphQL) spelling, values the stored one.

class ProjectStatus(str, enum.Enum):
    planning = "planning"
    active = "active"
    completed = "completed"
    on_hold = "on-hold"

class TaskStatus(str, enum.Enum):
    todo = "todo"
    in_progress = "in-progress"
    done = "done"

class Priority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"

# --- MODELS ---

class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_status_created_at", "status", "created_at"),
    )
    
    id = Column(String(36), primary_key=True, default=new_id)
    
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    
    status = Column(String(20), nullable=False, default=ProjectStatus.planning.value)
    progress = Column(Integer, nullable=False, default=0)
    
    # [{"name": ..., "avatar": ...}] in display order
    team = Column(JSON, nullable=False, default=list)
    
    due_date = Column(DateTime(timezone=True), nullable=True, index=True)
    
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    
    tasks = relationship("Task", back_populates="project", cascade="all, delete")

class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_status_priority_project", "status", "priority", "project_id"),
    )
    
    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    
    status = Column(String(20), nullable=False, default=TaskStatus.todo.value)
    priority = Column(String(10), nullable=False, default=Priority.medium.value)
    
    assignee_name = Column(String, nullable=False, index=True)
    assignee_avatar = Column(String, nullable=True)
    
    due_date = Column(DateTime(timezone=True), nullable=True, index=True)
    
    estimated_hours = Column(Float, nullable=True)
    actual_hours = Column(Float, nullable=False, default=0.0)
    
    tags = Column(JSON, nullable=False, default=list)
    
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    
    project = relationship("Project", back_populates="tasks")

    @property
    def assignee(self):
        return {"name": self.assignee_name, "avatar": self.assignee_avatar}

    @assignee.setter
    def assignee(self, value):
        self.assignee_name = value["name"]
        self.assignee_avatar = value.get("avatar")
