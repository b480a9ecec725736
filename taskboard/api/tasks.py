# taskboard/api/tasks.py
"""
Task routes.

Thin wiring: parse input, call the repository or lifecycle service, wrap
the result in the envelope. Every route sits behind the auth gate.
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from taskboard.api.responses import success
from taskboard.core.security import get_current_user
from taskboard.models import TaskCreate, TaskUpdate, UserPublic
from taskboard.tasks import lifecycle, repository

router = APIRouter(
    prefix="/api/tasks",
    tags=["Tasks"],
    dependencies=[Depends(get_current_user)],
)


class StatusChange(BaseModel):
    status: Optional[Any] = None


class StageChange(BaseModel):
    stage: Optional[Any] = None


@router.get("")
async def list_tasks(
    project_id: Optional[str] = Query(None, alias="projectId"),
    project: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = Query(None),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
):
    """List tasks. `project` wins over `projectId` when both are given."""
    tasks = await repository.list_tasks(
        project=project or project_id,
        status=status_filter,
        priority=priority,
        assigned_to=assigned_to,
    )
    return success(tasks, count=len(tasks))


@router.get("/{task_id}")
async def get_task(task_id: str):
    return success(await repository.get_task(task_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, user: UserPublic = Depends(get_current_user)):
    return success(await repository.create_task(payload, user))


@router.put("/{task_id}")
async def update_task(task_id: str, payload: TaskUpdate):
    return success(await repository.update_task(task_id, payload))


@router.delete("/{task_id}")
async def delete_task(task_id: str):
    await repository.delete_task(task_id)
    return success({}, message="Task deleted successfully")


@router.patch("/{task_id}/status")
async def update_task_status(task_id: str, payload: Optional[StatusChange] = None):
    task = await lifecycle.set_status(task_id, payload.status if payload else None)
    return success(task, message=f"Task status updated to {task['status']}")


@router.patch("/{task_id}/stage")
async def update_task_stage(task_id: str, payload: Optional[StageChange] = None):
    task = await lifecycle.set_stage(task_id, payload.stage if payload else None)
    return success(task, message=f"Task stage updated to {task['stage']}")
