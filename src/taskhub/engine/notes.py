"""Note mutation service."""

import logging
from typing import Optional
from uuid import UUID

from taskhub.db.repositories import NoteRepository, TaskRepository
from taskhub.engine.base import MutationService
from taskhub.engine.errors import NotFoundError, ValidationError
from taskhub.models import ActivityAction, EntityType, Note
from taskhub.observability.metrics import metrics
from taskhub.realtime.messages import NoteDeletedMessage
from taskhub.utils.time import utc_now

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 50


def excerpt(content: str) -> str:
    """First 50 characters of a note, used in activity descriptions."""
    return content[:EXCERPT_LENGTH]


def validate_content(content: Optional[str]) -> str:
    if content is None or not content.strip():
        raise ValidationError("content", "Content is required")
    return content


class NoteService(MutationService):
    """Create, update and delete notes attached to tasks."""

    def __init__(self, session, gateway):
        super().__init__(session, gateway)
        self.notes = NoteRepository(session)
        self.tasks = TaskRepository(session)

    async def list_for_task(self, task_id: UUID) -> list[Note]:
        """A task's notes, newest first. Empty for an unknown task."""
        return await self.notes.list_for_task(task_id)

    async def get_note(self, note_id: UUID) -> Note | None:
        return await self.notes.get(note_id)

    async def create(self, *, task_id: UUID, content: str) -> Note:
        """Attach a note to an existing task."""
        validate_content(content)

        async with self._unit_of_work("create note"):
            title = await self.tasks.get_title(task_id)
            if title is None:
                raise NotFoundError("Task", task_id)

            note = await self.notes.create(task_id=task_id, content=content)
            activity = await self.recorder.record(
                ActivityAction.NOTE_CREATED,
                EntityType.NOTE,
                note.id,
                title,
                description=f"Note added: {excerpt(content)}",
                additional_data={"taskId": str(task_id)},
            )

        self.gateway.notify_note_added(note)
        self.gateway.notify_activity_update(activity)

        metrics.inc_counter("notes.created")
        logger.info(f"Note added to task: {title}")
        return note

    async def update(self, note_id: UUID, *, content: str) -> Note | None:
        """Replace a note's content. Returns None for an unknown id."""
        validate_content(content)

        async with self._unit_of_work("update note"):
            found = await self.notes.get_with_task_title(note_id)
            if found is None:
                return None
            _, title = found

            note = await self.notes.update_content(note_id, content)
            if note is None:
                return None
            updated_at = utc_now()

            activity = await self.recorder.record(
                ActivityAction.NOTE_UPDATED,
                EntityType.NOTE,
                note.id,
                title,
                description=f"Note updated: {excerpt(content)}",
                additional_data={"taskId": str(note.task_id)},
            )

        self.gateway.notify_note_updated(note, updated_at)
        self.gateway.notify_activity_update(activity)

        metrics.inc_counter("notes.updated")
        logger.info(f"Note updated in task: {title}")
        return note

    async def delete(self, note_id: UUID) -> bool:
        """Delete a note. The owning task is never touched.

        Returns False for an unknown id.
        """
        async with self._unit_of_work("delete note"):
            found = await self.notes.get_with_task_title(note_id)
            if found is None:
                return False
            note, title = found

            # Title and payload are captured while the row still exists
            activity = await self.recorder.record(
                ActivityAction.NOTE_DELETED,
                EntityType.NOTE,
                note.id,
                title,
                additional_data={"taskId": str(note.task_id)},
            )
            message = NoteDeletedMessage(id=note.id, task_id=note.task_id)
            await self.notes.delete(note_id)

        self.gateway.notify_note_deleted(message)
        self.gateway.notify_activity_update(activity)

        metrics.inc_counter("notes.deleted")
        logger.info(f"Note deleted from task: {title}")
        return True
