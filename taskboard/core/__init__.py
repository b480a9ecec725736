# taskboard/core/__init__.py
"""
Core module - configuration, logging, exceptions and the auth gate.
"""
from .config import settings
from .exceptions import (
    TaskboardError,
    Unauthenticated,
    ValidationError,
    NotFound,
    Conflict,
    InternalError,
)

__all__ = [
    "settings",
    "TaskboardError",
    "Unauthenticated",
    "ValidationError",
    "NotFound",
    "Conflict",
    "InternalError",
]
