# taskboard/tasks/lifecycle.py
"""
Task Lifecycle Service.

Two guarded transitions on top of the repository:

    set_status: todo <-> in-progress <-> done, any direction.
                Entering done stamps completedAt and forces stage Done.
                Leaving done clears completedAt; stage stays where it is.
    set_stage:  Planning / Design / Development / Testing / Done.
                Touches stage only, so stage may diverge from status.

Invalid values are rejected before the task is loaded, so a rejected call
never mutates anything.
"""
from typing import Any, Dict

from taskboard.core.exceptions import ValidationError
from taskboard.core.logging import log
from taskboard.lib.monitoring import record_transition
from taskboard.models import TaskStage, TaskStatus
from taskboard.models.task import completion_fields, utcnow
from taskboard.tasks import repository

VALID_STATUSES = [s.value for s in TaskStatus]
VALID_STAGES = [s.value for s in TaskStage]


def parse_status(value: Any) -> TaskStatus:
    if value not in VALID_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}")
    return TaskStatus(value)


def parse_stage(value: Any) -> TaskStage:
    if value not in VALID_STAGES:
        raise ValidationError(f"Invalid stage. Must be one of: {', '.join(VALID_STAGES)}")
    return TaskStage(value)


async def set_status(task_id: Any, new_status: Any) -> Dict[str, Any]:
    status = parse_status(new_status)
    task = await repository.load_task(task_id)

    changes: Dict[str, Any] = {"status": status}
    changes.update(completion_fields(status, utcnow()))

    await repository.save_changes(task, changes)
    record_transition("status", status.value)
    log("LIFECYCLE", f"Task {task.id} status {task.status.value} -> {status.value}")
    return await repository.get_task(task.id)


async def set_stage(task_id: Any, new_stage: Any) -> Dict[str, Any]:
    stage = parse_stage(new_stage)
    task = await repository.load_task(task_id)

    await repository.save_changes(task, {"stage": stage})
    record_transition("stage", stage.value)
    log("LIFECYCLE", f"Task {task.id} stage {task.stage.value} -> {stage.value}")
    return await repository.get_task(task.id)


__all__ = ["set_status", "set_stage", "parse_status", "parse_stage", "VALID_STATUSES", "VALID_STAGES"]
