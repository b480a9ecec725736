# taskboard/models/task.py
"""
Task document, its enumerations, and the request schemas that feed it.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from beanie import Document, PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pymongo import ASCENDING, IndexModel


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskStage(str, Enum):
    PLANNING = "Planning"
    DESIGN = "Design"
    DEVELOPMENT = "Development"
    TESTING = "Testing"
    DONE = "Done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

# Allowed values per enum field, in declaration order
ENUM_VALUES = {
    "status": [s.value for s in TaskStatus],
    "stage": [s.value for s in TaskStage],
    "priority": [p.value for p in TaskPriority],
}

# (field, pydantic error type) -> client-facing message
FIELD_MESSAGES = {
    ("title", "missing"): "Please provide a task title",
    ("title", "string_too_short"): "Please provide a task title",
    ("title", "string_too_long"): f"Title cannot exceed {TITLE_MAX_LENGTH} characters",
    ("description", "string_too_long"): f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
    ("project", "missing"): "Task must belong to a project",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def completion_fields(status: TaskStatus, now: datetime) -> Dict[str, Any]:
    """
    Derived fields for a status change.

    Entering done stamps completion and forces the Done stage. Any other
    status clears completion; stage is left alone.
    """
    if status == TaskStatus.DONE:
        return {"completed_at": now, "stage": TaskStage.DONE}
    return {"completed_at": None}


class Task(Document):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    project: PydanticObjectId
    assigned_to: Optional[PydanticObjectId] = Field(default=None, alias="assignedTo")
    created_by: Optional[PydanticObjectId] = Field(default=None, alias="createdBy")

    status: TaskStatus = TaskStatus.TODO
    stage: TaskStage = TaskStage.PLANNING
    priority: TaskPriority = TaskPriority.MEDIUM

    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    tags: List[str] = Field(default_factory=list)
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")

    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    # Bumped on every write; conditional updates match on it
    revision: int = 0

    @field_validator("title", "description", mode="before")
    @classmethod
    def _trim_text(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _trim_tags(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_strip(tag) for tag in value]
        return value

    class Settings:
        name = "tasks"
        indexes = [
            IndexModel([("project", ASCENDING), ("status", ASCENDING)]),
            IndexModel([("assignedTo", ASCENDING)]),
        ]


class TaskCreate(BaseModel):
    """
    Body of POST /api/tasks.

    The project may arrive as `project` or `projectId`; `project` wins when
    both are present. `createdBy`, `stage` and `status` are not accepted here.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    project: PydanticObjectId
    assigned_to: Optional[PydanticObjectId] = Field(default=None, alias="assignedTo")
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _trim_text(cls, value: Any) -> Any:
        return _strip(value)

    @model_validator(mode="before")
    @classmethod
    def _normalize_project(cls, data: Any) -> Any:
        if isinstance(data, dict) and "projectId" in data:
            data = dict(data)
            project_id = data.pop("projectId")
            if data.get("project") is None:
                data["project"] = project_id
        return data


class TaskUpdate(BaseModel):
    """
    Body of PUT /api/tasks/{id}. Every field optional; only sent fields change.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    assigned_to: Optional[PydanticObjectId] = Field(default=None, alias="assignedTo")
    status: Optional[TaskStatus] = None
    stage: Optional[TaskStage] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    tags: Optional[List[str]] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _trim_text(cls, value: Any) -> Any:
        return _strip(value)


__all__ = [
    "Task",
    "TaskStatus",
    "TaskStage",
    "TaskPriority",
    "TaskCreate",
    "TaskUpdate",
    "completion_fields",
    "ENUM_VALUES",
    "FIELD_MESSAGES",
]
