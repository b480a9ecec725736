# taskboard/tasks/population.py
"""
Population - resolve stored references to display fields.

project    -> {_id, title}
assignedTo -> {_id, name, email, avatar}
createdBy  -> {_id, name}

References are collected across the whole batch so each collection is hit
once per call. Dangling references populate as None.
"""
from typing import Any, Dict, Iterable, List, Optional, Set

from beanie import PydanticObjectId

from taskboard.models import Project, Task, User, UserPublic

# Fields returned to clients, everything else on the document is internal
TASK_FIELDS = {
    "id",
    "title",
    "description",
    "project",
    "assigned_to",
    "created_by",
    "status",
    "stage",
    "priority",
    "due_date",
    "tags",
    "completed_at",
    "created_at",
    "updated_at",
    "revision",
}


async def _projects_by_id(ids: Set[PydanticObjectId]) -> Dict[PydanticObjectId, Dict[str, Any]]:
    if not ids:
        return {}
    projects = await Project.find({"_id": {"$in": list(ids)}}).to_list()
    return {p.id: {"_id": str(p.id), "title": p.title} for p in projects}


async def _users_by_id(ids: Set[PydanticObjectId]) -> Dict[PydanticObjectId, UserPublic]:
    if not ids:
        return {}
    users = await User.find({"_id": {"$in": list(ids)}}, projection_model=UserPublic).to_list()
    return {u.id: u for u in users}


def _assignee(user: Optional[UserPublic]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return user.model_dump(mode="json", by_alias=True)


def _creator(user: Optional[UserPublic]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {"_id": str(user.id), "name": user.name}


async def populate(tasks: Iterable[Task]) -> List[Dict[str, Any]]:
    tasks = list(tasks)
    project_ids = {t.project for t in tasks}
    user_ids = {t.assigned_to for t in tasks if t.assigned_to} | {t.created_by for t in tasks if t.created_by}

    projects = await _projects_by_id(project_ids)
    users = await _users_by_id(user_ids)

    records = []
    for task in tasks:
        record = task.model_dump(mode="json", by_alias=True, include=TASK_FIELDS)
        record["project"] = projects.get(task.project)
        record["assignedTo"] = _assignee(users.get(task.assigned_to)) if task.assigned_to else None
        record["createdBy"] = _creator(users.get(task.created_by)) if task.created_by else None
        records.append(record)
    return records


async def populate_one(task: Task) -> Dict[str, Any]:
    records = await populate([task])
    return records[0]
