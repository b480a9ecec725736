# taskboard/tasks/repository.py
"""
Task Repository Contract.

CRUD and filtered queries over Task records. Every read returns populated
records (see population.py). Every write is a conditional update on the
record's revision, so a stale read can never silently overwrite a newer
write.
"""
from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from pydantic import ValidationError as PydanticValidationError

from taskboard.core.exceptions import Conflict, NotFound, ValidationError
from taskboard.core.logging import log
from taskboard.models import Project, Task, TaskCreate, TaskUpdate, UserPublic
from taskboard.models.task import ENUM_VALUES, FIELD_MESSAGES, completion_fields, utcnow
from taskboard.tasks.population import populate, populate_one

TASK_NOT_FOUND = "Task not found"

# Filter keys accepted by list_tasks -> stored field name
FILTER_FIELDS = {
    "project": "project",
    "status": "status",
    "priority": "priority",
    "assigned_to": "assignedTo",
}

# Never writable through update()
IMMUTABLE_FIELDS = {"id", "project", "created_by", "created_at", "completed_at", "revision"}


def validation_error(exc: PydanticValidationError) -> ValidationError:
    return ValidationError.from_errors(exc.errors(), FIELD_MESSAGES, ENUM_VALUES)


def parse_id(value: Any) -> Optional[PydanticObjectId]:
    """ObjectId from a path/query value, or None if malformed."""
    if isinstance(value, PydanticObjectId):
        return value
    if value is None or not PydanticObjectId.is_valid(str(value)):
        return None
    return PydanticObjectId(str(value))


def build_filter(
    project: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assigned_to: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Conjunction over the given fields. A missing (None or empty) value means
    no constraint on that field, not "match null".
    """
    raw = {"project": project, "status": status, "priority": priority, "assigned_to": assigned_to}
    query: Dict[str, Any] = {}

    for key, value in raw.items():
        if value in (None, ""):
            continue
        field = FILTER_FIELDS[key]
        if key in ("project", "assigned_to"):
            object_id = parse_id(value)
            if object_id is None:
                raise ValidationError(f"Invalid {field} id: {value}")
            query[field] = object_id
        else:
            allowed = ENUM_VALUES[key]
            if value not in allowed:
                raise ValidationError(f"Invalid {key}. Must be one of: {', '.join(allowed)}")
            query[field] = value
    return query


async def load_task(task_id: Any) -> Task:
    """Fetch the raw document or raise NotFound."""
    object_id = parse_id(task_id)
    task = await Task.get(object_id) if object_id else None
    if task is None:
        raise NotFound(TASK_NOT_FOUND)
    return task


def revision_match(revision: int) -> Any:
    """Stored-revision condition. Records written without the field load as revision 0."""
    if revision == 0:
        return {"$in": [0, None]}
    return revision


async def save_changes(task: Task, changes: Dict[str, Any]) -> Task:
    """
    Apply `changes` (field name -> value) to `task` and persist them.

    The merged document is re-validated as a whole, so partial updates obey
    the same constraints as creation. The write only lands if the stored
    revision still equals the one `task` was read at.
    """
    merged = task.model_dump()
    merged.update(changes)
    merged["updated_at"] = utcnow()
    merged["revision"] = task.revision + 1

    try:
        candidate = Task.model_validate(merged)
    except PydanticValidationError as e:
        raise validation_error(e)

    document = candidate.model_dump(by_alias=True, exclude={"id", "revision_id"})
    result = await Task.find_one({"_id": task.id, "revision": revision_match(task.revision)}).update(
        {"$set": document}
    )

    if result.matched_count == 0:
        if await Task.get(task.id) is None:
            raise NotFound(TASK_NOT_FOUND)
        log("TASKS", f"Revision conflict on task {task.id} (read at {task.revision})")
        raise Conflict("Task was modified by another request, reload and retry")

    log("QUERY", f"Task {task.id} -> revision {candidate.revision}", data=sorted(changes))
    return candidate


# ---------------------------------------------------------------------------
# CONTRACT
# ---------------------------------------------------------------------------

async def list_tasks(
    project: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assigned_to: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """All matching tasks, newest first, populated."""
    query = build_filter(project=project, status=status, priority=priority, assigned_to=assigned_to)
    log("QUERY", "list tasks", data=query)
    tasks = await Task.find(query).sort("-createdAt", "-_id").to_list()
    return await populate(tasks)


async def get_task(task_id: Any) -> Dict[str, Any]:
    task = await load_task(task_id)
    return await populate_one(task)


async def create_task(data: TaskCreate, user: UserPublic) -> Dict[str, Any]:
    """
    Insert a new task owned by `data.project`.

    createdBy is always the requesting user and the stage always starts at
    Planning, whatever the input carried.
    """
    if await Project.get(data.project) is None:
        raise ValidationError("Project not found")

    try:
        task = Task(
            **data.model_dump(),
            created_by=user.id,
        )
    except PydanticValidationError as e:
        raise validation_error(e)

    await task.insert()
    log("TASKS", f"Created task {task.id} in project {task.project} by {user.id}")
    return await populate_one(task)


async def update_task(task_id: Any, patch: TaskUpdate) -> Dict[str, Any]:
    """
    Partial update: only fields present in the request body change.

    A status change here carries the same completion side effects as
    lifecycle.set_status.
    """
    task = await load_task(task_id)
    changes = {
        key: value
        for key, value in patch.model_dump(exclude_unset=True).items()
        if key not in IMMUTABLE_FIELDS
    }

    new_status = changes.get("status")
    if new_status is not None and new_status != task.status:
        changes.update(completion_fields(new_status, utcnow()))

    updated = await save_changes(task, changes)
    log("TASKS", f"Updated task {task.id}", data=sorted(changes))
    return await get_task(updated.id)


async def delete_task(task_id: Any) -> None:
    task = await load_task(task_id)
    await task.delete()
    log("TASKS", f"Deleted task {task.id}")


__all__ = [
    "list_tasks",
    "get_task",
    "create_task",
    "update_task",
    "delete_task",
    "load_task",
    "save_changes",
    "build_filter",
]
