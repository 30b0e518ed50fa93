"""
Task mutation service tests.

Every successful mutation writes one activity in the same commit as the task
change and broadcasts the entity event followed by ActivityUpdate. Rejected or
failed mutations leave no trace.
"""

from uuid import uuid4

import pytest
from sqlalchemy.exc import SQLAlchemyError

from taskhub.db.repositories import ActivityRepository, NoteRepository, TaskRepository
from taskhub.engine import NoteService, PersistenceError, TaskService, ValidationError
from taskhub.models import ActivityAction, EntityType
from taskhub.observability.metrics import metrics


async def _activities(session):
    return await ActivityRepository(session).list_recent(100)


@pytest.mark.asyncio
async def test_create_task_defaults(session, gateway, subscriber):
    """A new task is pending, with equal timestamps, one activity and two events."""
    service = TaskService(session, gateway)

    task = await service.create(title="Buy milk", description="2 litres")
    await gateway.drain()

    assert task.title == "Buy milk"
    assert task.description == "2 litres"
    assert task.is_completed is False
    assert task.created_at == task.updated_at
    assert task.notes == []

    activities = await _activities(session)
    assert len(activities) == 1
    assert activities[0].action == ActivityAction.TASK_CREATED
    assert activities[0].entity_type == EntityType.TASK
    assert activities[0].entity_id == task.id
    assert activities[0].description == "Task 'Buy milk' was created"

    assert subscriber.events == ["TaskCreated", "ActivityUpdate"]
    created = subscriber.data_for("TaskCreated")[0]
    assert created["id"] == str(task.id)
    assert created["isCompleted"] is False
    assert created["notes"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
async def test_create_rejects_blank_title(session, gateway, subscriber, title):
    """Blank titles are rejected before anything is written or broadcast."""
    service = TaskService(session, gateway)

    with pytest.raises(ValidationError) as exc_info:
        await service.create(title=title)
    await gateway.drain()

    assert exc_info.value.field == "title"
    assert await TaskRepository(session).count() == 0
    assert await _activities(session) == []
    assert subscriber.sent == []


@pytest.mark.asyncio
async def test_create_rejects_overlong_title(session, gateway):
    service = TaskService(session, gateway)

    with pytest.raises(ValidationError):
        await service.create(title="x" * 256)

    assert await TaskRepository(session).count() == 0


@pytest.mark.asyncio
async def test_update_fields_emits_task_updated(session, gateway, subscriber):
    service = TaskService(session, gateway)
    task = await service.create(title="Draft")
    await gateway.drain()
    subscriber.sent.clear()

    updated = await service.update(task.id, title="Final", description="done soon")
    await gateway.drain()

    assert updated.title == "Final"
    assert updated.description == "done soon"
    assert updated.is_completed is False
    assert updated.created_at == task.created_at
    assert updated.updated_at >= updated.created_at

    assert (await _activities(session))[0].action == ActivityAction.TASK_UPDATED
    assert subscriber.events == ["TaskUpdated", "ActivityUpdate"]


@pytest.mark.asyncio
async def test_update_completion_only_emits_completion_changed(session, gateway, subscriber):
    """Changing only the completion flag reports a completion change, not an update."""
    service = TaskService(session, gateway)
    task = await service.create(title="Buy milk")
    await gateway.drain()
    subscriber.sent.clear()

    updated = await service.update(task.id, title="Buy milk", is_completed=True)
    await gateway.drain()

    assert updated.is_completed is True
    activities = await _activities(session)
    assert len(activities) == 2
    assert activities[0].action == ActivityAction.TASK_COMPLETED
    assert subscriber.events == ["TaskCompletionChanged", "ActivityUpdate"]
    changed = subscriber.data_for("TaskCompletionChanged")[0]
    assert changed == {
        "id": str(task.id),
        "title": "Buy milk",
        "isCompleted": True,
        "updatedAt": changed["updatedAt"],
    }


@pytest.mark.asyncio
async def test_update_rejects_blank_title(session, gateway):
    service = TaskService(session, gateway)
    task = await service.create(title="Keep me")

    with pytest.raises(ValidationError):
        await service.update(task.id, title=" ")

    assert (await service.get_task(task.id)).title == "Keep me"
    assert len(await _activities(session)) == 1


@pytest.mark.asyncio
async def test_update_unknown_task_returns_none(session, gateway, subscriber):
    service = TaskService(session, gateway)

    assert await service.update(uuid4(), title="Nothing") is None
    await gateway.drain()

    assert await _activities(session) == []
    assert subscriber.sent == []


@pytest.mark.asyncio
async def test_toggle_twice_restores_state(session, gateway, subscriber):
    """Toggling twice is an involution with complementary activities."""
    service = TaskService(session, gateway)
    task = await service.create(title="Flip")
    await gateway.drain()
    subscriber.sent.clear()

    assert await service.toggle_completion(task.id) is True
    assert (await service.get_task(task.id)).is_completed is True
    assert await service.toggle_completion(task.id) is True
    await gateway.drain()

    final = await service.get_task(task.id)
    assert final.is_completed is False
    assert final.updated_at >= task.updated_at

    actions = [a.action for a in await _activities(session)]
    assert actions == [
        ActivityAction.TASK_UNCOMPLETED,
        ActivityAction.TASK_COMPLETED,
        ActivityAction.TASK_CREATED,
    ]
    assert subscriber.events == [
        "TaskCompletionChanged",
        "ActivityUpdate",
        "TaskCompletionChanged",
        "ActivityUpdate",
    ]
    flags = [d["isCompleted"] for d in subscriber.data_for("TaskCompletionChanged")]
    assert flags == [True, False]


@pytest.mark.asyncio
async def test_toggle_unknown_task_returns_false(session, gateway):
    service = TaskService(session, gateway)

    assert await service.toggle_completion(uuid4()) is False
    assert await _activities(session) == []


@pytest.mark.asyncio
async def test_delete_task_cascades_notes(session, gateway, subscriber):
    """Deleting a task removes its notes and keeps its title in the activity log."""
    tasks = TaskService(session, gateway)
    notes = NoteService(session, gateway)
    task = await tasks.create(title="Doomed")
    await notes.create(task_id=task.id, content="one")
    await notes.create(task_id=task.id, content="two")
    await gateway.drain()
    subscriber.sent.clear()

    assert await tasks.delete(task.id) is True
    await gateway.drain()

    assert await tasks.get_task(task.id) is None
    assert await NoteRepository(session).count() == 0

    latest = (await _activities(session))[0]
    assert latest.action == ActivityAction.TASK_DELETED
    assert latest.entity_id == task.id
    assert latest.entity_title == "Doomed"
    assert latest.description == "Task 'Doomed' was deleted"

    assert subscriber.events == ["TaskDeleted", "ActivityUpdate"]
    assert subscriber.data_for("TaskDeleted") == [{"taskId": str(task.id)}]


@pytest.mark.asyncio
async def test_delete_unknown_task_returns_false(session, gateway, subscriber):
    service = TaskService(session, gateway)

    assert await service.delete(uuid4()) is False
    await gateway.drain()

    assert subscriber.sent == []


@pytest.mark.asyncio
async def test_list_tasks_newest_first_with_notes(session, gateway):
    tasks = TaskService(session, gateway)
    notes = NoteService(session, gateway)
    first = await tasks.create(title="first")
    second = await tasks.create(title="second")
    await notes.create(task_id=first.id, content="older")
    await notes.create(task_id=first.id, content="newer")

    listed = await tasks.list_tasks()

    assert [t.id for t in listed] == [second.id, first.id]
    assert [n.content for n in listed[1].notes] == ["newer", "older"]


@pytest.mark.asyncio
async def test_audit_failure_rolls_back_task(session, gateway, subscriber, monkeypatch):
    """A failed activity write rejects the whole mutation: no task, no broadcast."""
    service = TaskService(session, gateway)

    async def failing_record(*args, **kwargs):
        raise SQLAlchemyError("Simulated activity write failure")

    monkeypatch.setattr(service.recorder, "record", failing_record)

    with pytest.raises(PersistenceError):
        await service.create(title="Never saved")
    await gateway.drain()

    assert await TaskRepository(session).count() == 0
    assert subscriber.sent == []


@pytest.mark.asyncio
async def test_broadcast_failure_does_not_fail_mutation(session, gateway, monkeypatch):
    """The gateway swallows its own errors; the committed task stays."""
    service = TaskService(session, gateway)

    def failing_publish(event, payload):
        raise RuntimeError("Simulated broadcast failure")

    monkeypatch.setattr(gateway, "publish", failing_publish)

    task = await service.create(title="Saved anyway")

    assert (await service.get_task(task.id)).title == "Saved anyway"
    assert len(await _activities(session)) == 1


@pytest.mark.asyncio
async def test_driver_failure_becomes_persistence_error(session, gateway, subscriber, monkeypatch):
    """A connection dropped by the driver is reported like any other store failure."""
    service = TaskService(session, gateway)

    async def failing_record(*args, **kwargs):
        raise ConnectionRefusedError("Connect call failed")

    monkeypatch.setattr(service.recorder, "record", failing_record)

    with pytest.raises(PersistenceError) as exc_info:
        await service.create(title="Never saved")
    await gateway.drain()

    assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)
    assert metrics.snapshot()["counters"]["db.rollback"] == 1
    assert await TaskRepository(session).count() == 0
    assert subscriber.sent == []
