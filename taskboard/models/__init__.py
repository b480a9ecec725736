# taskboard/models/__init__.py
from .user import User, UserPublic
from .project import Project
from .task import (
    Task,
    TaskStatus,
    TaskStage,
    TaskPriority,
    TaskCreate,
    TaskUpdate,
)

# Documents registered with Beanie on start-up
DOCUMENT_MODELS = [User, Project, Task]

__all__ = [
    "User",
    "UserPublic",
    "Project",
    "Task",
    "TaskStatus",
    "TaskStage",
    "TaskPriority",
    "TaskCreate",
    "TaskUpdate",
    "DOCUMENT_MODELS",
]
