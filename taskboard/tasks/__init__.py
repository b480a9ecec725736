# taskboard/tasks/__init__.py
"""
Task repository contract and lifecycle service.
"""
from . import repository, lifecycle

__all__ = ["repository", "lifecycle"]
