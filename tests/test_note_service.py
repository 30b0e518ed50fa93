"""
Note mutation service tests.
"""

from uuid import uuid4

import pytest

from taskhub.db.repositories import ActivityRepository, NoteRepository
from taskhub.engine import NoteService, NotFoundError, TaskService, ValidationError
from taskhub.models import ActivityAction, EntityType


@pytest.fixture
async def task(session, gateway):
    return await TaskService(session, gateway).create(title="Groceries")


@pytest.mark.asyncio
async def test_create_note_records_task_title(session, gateway, subscriber, task):
    service = NoteService(session, gateway)
    await gateway.drain()
    subscriber.sent.clear()

    note = await service.create(task_id=task.id, content="2%")
    await gateway.drain()

    assert note.task_id == task.id
    assert note.content == "2%"

    activity = (await ActivityRepository(session).list_recent(1))[0]
    assert activity.action == ActivityAction.NOTE_CREATED
    assert activity.entity_type == EntityType.NOTE
    assert activity.entity_id == note.id
    assert activity.entity_title == "Groceries"
    assert activity.description == "Note added: 2%"
    assert activity.additional_data == {"taskId": str(task.id)}

    assert subscriber.events == ["NoteAdded", "ActivityUpdate"]
    added = subscriber.data_for("NoteAdded")[0]
    assert added["taskId"] == str(task.id)
    assert added["content"] == "2%"


@pytest.mark.asyncio
async def test_activity_description_truncates_content(session, gateway, task):
    service = NoteService(session, gateway)
    content = "a" * 50 + "b" * 30

    await service.create(task_id=task.id, content=content)

    activity = (await ActivityRepository(session).list_recent(1))[0]
    assert activity.description == "Note added: " + "a" * 50


@pytest.mark.asyncio
async def test_create_note_for_unknown_task(session, gateway, subscriber):
    service = NoteService(session, gateway)

    with pytest.raises(NotFoundError):
        await service.create(task_id=uuid4(), content="orphan")
    await gateway.drain()

    assert await NoteRepository(session).count() == 0
    assert await ActivityRepository(session).list_recent(10) == []
    assert subscriber.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "  "])
async def test_create_note_rejects_blank_content(session, gateway, task, content):
    service = NoteService(session, gateway)

    with pytest.raises(ValidationError):
        await service.create(task_id=task.id, content=content)

    assert await NoteRepository(session).count() == 0


@pytest.mark.asyncio
async def test_update_note(session, gateway, subscriber, task):
    service = NoteService(session, gateway)
    note = await service.create(task_id=task.id, content="draft")
    await gateway.drain()
    subscriber.sent.clear()

    updated = await service.update(note.id, content="final wording")
    await gateway.drain()

    assert updated.id == note.id
    assert updated.content == "final wording"
    assert (await service.get_note(note.id)).content == "final wording"

    activity = (await ActivityRepository(session).list_recent(1))[0]
    assert activity.action == ActivityAction.NOTE_UPDATED
    assert activity.description == "Note updated: final wording"
    assert activity.entity_title == "Groceries"

    assert subscriber.events == ["NoteUpdated", "ActivityUpdate"]
    payload = subscriber.data_for("NoteUpdated")[0]
    assert set(payload) == {"id", "taskId", "content", "updatedAt"}
    assert payload["content"] == "final wording"


@pytest.mark.asyncio
async def test_update_unknown_note_returns_none(session, gateway):
    service = NoteService(session, gateway)

    assert await service.update(uuid4(), content="anything") is None


@pytest.mark.asyncio
async def test_delete_last_note_keeps_task(session, gateway, subscriber, task):
    """The activity uses the owning task's title and the task survives."""
    service = NoteService(session, gateway)
    note = await service.create(task_id=task.id, content="only note")
    await gateway.drain()
    subscriber.sent.clear()

    assert await service.delete(note.id) is True
    await gateway.drain()

    assert await service.get_note(note.id) is None
    remaining = await TaskService(session, gateway).get_task(task.id)
    assert remaining is not None
    assert remaining.notes == []

    activity = (await ActivityRepository(session).list_recent(1))[0]
    assert activity.action == ActivityAction.NOTE_DELETED
    assert activity.entity_id == note.id
    assert activity.entity_title == "Groceries"
    assert activity.description == "Note was deleted from task 'Groceries'"

    assert subscriber.events == ["NoteDeleted", "ActivityUpdate"]
    assert subscriber.data_for("NoteDeleted") == [
        {"id": str(note.id), "taskId": str(task.id)}
    ]


@pytest.mark.asyncio
async def test_delete_unknown_note_returns_false(session, gateway):
    service = NoteService(session, gateway)

    assert await service.delete(uuid4()) is False


@pytest.mark.asyncio
async def test_list_for_task_newest_first(session, gateway, task):
    service = NoteService(session, gateway)
    await service.create(task_id=task.id, content="first")
    await service.create(task_id=task.id, content="second")

    listed = await service.list_for_task(task.id)

    assert [n.content for n in listed] == ["second", "first"]
    assert await service.list_for_task(uuid4()) == []
