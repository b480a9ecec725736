# taskboard/__init__.py
"""
Taskboard API - Kanban task management over MongoDB.
"""
__version__ = "1.0.0"
