# taskboard/api/__init__.py
"""
API module - All route handlers.
"""
from . import health, auth, tasks

__all__ = [
    "health",
    "auth",
    "tasks",
]
