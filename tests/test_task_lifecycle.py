import pytest

from beanie import PydanticObjectId

from taskboard.core.exceptions import NotFound, ValidationError
from taskboard.tasks import lifecycle, repository

pytestmark = pytest.mark.anyio


# ═══════════════════════════════════════════════════════
# STATUS TRANSITIONS
# ═══════════════════════════════════════════════════════

async def test_done_stamps_completion_and_stage(make_task):
    task = await make_task()
    done = await lifecycle.set_status(task["_id"], "done")

    assert done["status"] == "done"
    assert done["stage"] == "Done"
    assert done["completedAt"] is not None


@pytest.mark.parametrize("status", ["todo", "in-progress"])
async def test_leaving_done_clears_completion(make_task, status):
    task = await make_task()
    await lifecycle.set_status(task["_id"], "done")

    reopened = await lifecycle.set_status(task["_id"], status)
    assert reopened["status"] == status
    assert reopened["completedAt"] is None


@pytest.mark.parametrize("status", ["todo", "in-progress"])
async def test_non_done_status_never_has_completion(make_task, status):
    task = await make_task()
    moved = await lifecycle.set_status(task["_id"], status)
    assert moved["completedAt"] is None
    assert moved["stage"] == "Planning"


@pytest.mark.parametrize("status", ["archived", "Done", "", None, 3])
async def test_invalid_status_is_rejected_without_mutation(make_task, status):
    task = await make_task()

    with pytest.raises(ValidationError) as exc_info:
        await lifecycle.set_status(task["_id"], status)
    assert exc_info.value.message == "Invalid status. Must be one of: todo, in-progress, done"

    unchanged = await repository.get_task(task["_id"])
    assert unchanged["status"] == "todo"
    assert unchanged["revision"] == task["revision"]


async def test_invalid_status_checked_before_lookup():
    with pytest.raises(ValidationError):
        await lifecycle.set_status(str(PydanticObjectId()), "archived")


async def test_set_status_missing_task():
    with pytest.raises(NotFound):
        await lifecycle.set_status(str(PydanticObjectId()), "done")


async def test_status_round_trip_keeps_stage(make_task):
    """Entering done advances the stage; leaving done does not roll it back."""
    task = await make_task(title="Draft wireframes")
    assert (task["status"], task["stage"], task["completedAt"]) == ("todo", "Planning", None)

    done = await lifecycle.set_status(task["_id"], "done")
    assert (done["status"], done["stage"]) == ("done", "Done")
    assert done["completedAt"] is not None

    back = await lifecycle.set_status(task["_id"], "todo")
    assert (back["status"], back["stage"], back["completedAt"]) == ("todo", "Done", None)


# ═══════════════════════════════════════════════════════
# STAGE TRANSITIONS
# ═══════════════════════════════════════════════════════

@pytest.mark.parametrize("stage", ["Planning", "Design", "Development", "Testing", "Done"])
async def test_set_stage_touches_only_stage(make_task, stage):
    task = await make_task()
    moved = await lifecycle.set_stage(task["_id"], stage)

    assert moved["stage"] == stage
    assert moved["status"] == "todo"
    assert moved["completedAt"] is None


async def test_stage_done_does_not_complete_task(make_task):
    task = await make_task()
    moved = await lifecycle.set_stage(task["_id"], "Done")
    assert moved["status"] == "todo"
    assert moved["completedAt"] is None


async def test_set_stage_keeps_completion_of_done_task(make_task):
    task = await make_task()
    done = await lifecycle.set_status(task["_id"], "done")

    moved = await lifecycle.set_stage(task["_id"], "Testing")
    assert moved["status"] == "done"
    assert moved["completedAt"] == done["completedAt"]


@pytest.mark.parametrize("stage", ["planning", "Review", "", None])
async def test_invalid_stage_is_rejected_without_mutation(make_task, stage):
    task = await make_task()

    with pytest.raises(ValidationError, match="Invalid stage. Must be one of: Planning, Design, Development, Testing, Done"):
        await lifecycle.set_stage(task["_id"], stage)

    unchanged = await repository.get_task(task["_id"])
    assert unchanged["stage"] == "Planning"
    assert unchanged["revision"] == task["revision"]


async def test_set_stage_missing_task():
    with pytest.raises(NotFound):
        await lifecycle.set_stage("507f1f77bcf86cd799439011", "Design")
