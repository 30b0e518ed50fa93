"""Payloads pushed over the real-time channel."""

from datetime import datetime
from typing import Any
from uuid import UUID

from taskhub.api.schemas import ActivityResponse, CamelModel, NoteResponse, TaskResponse
from taskhub.models import Activity, BroadcastEvent, Note, Task


class TaskDeletedMessage(CamelModel):
    task_id: UUID


class TaskCompletionChangedMessage(CamelModel):
    id: UUID
    title: str
    is_completed: bool
    updated_at: datetime


class NoteUpdatedMessage(CamelModel):
    id: UUID
    task_id: UUID
    content: str
    updated_at: datetime


class NoteDeletedMessage(CamelModel):
    id: UUID
    task_id: UUID


class ConnectedMessage(CamelModel):
    connection_id: str


def envelope(event: BroadcastEvent, payload: CamelModel) -> dict[str, Any]:
    """Wrap a payload as ``{"event": ..., "data": ...}`` ready for ``send_json``."""
    return {"event": event.value, "data": payload.model_dump(mode="json", by_alias=True)}


def task_payload(task: Task) -> TaskResponse:
    return TaskResponse.model_validate(task)


def completion_payload(task: Task) -> TaskCompletionChangedMessage:
    return TaskCompletionChangedMessage(
        id=task.id,
        title=task.title,
        is_completed=task.is_completed,
        updated_at=task.updated_at,
    )


def note_payload(note: Note) -> NoteResponse:
    return NoteResponse.model_validate(note)


def note_updated_payload(note: Note, updated_at: datetime) -> NoteUpdatedMessage:
    return NoteUpdatedMessage(
        id=note.id,
        task_id=note.task_id,
        content=note.content,
        updated_at=updated_at,
    )


def activity_payload(activity: Activity) -> ActivityResponse:
    return ActivityResponse.from_model(activity)
