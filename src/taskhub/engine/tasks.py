"""Task mutation service."""

import logging
from typing import Optional
from uuid import UUID

from taskhub.db.repositories import TaskRepository
from taskhub.engine.base import MutationService
from taskhub.engine.errors import ValidationError
from taskhub.models import ActivityAction, EntityType, Task
from taskhub.observability.metrics import metrics

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255


def validate_title(title: Optional[str]) -> str:
    """Reject empty, whitespace-only and over-long titles."""
    if title is None or not title.strip():
        raise ValidationError("title", "Title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(
            "title", f"Title must be at most {MAX_TITLE_LENGTH} characters"
        )
    return title


class TaskService(MutationService):
    """Create, update, delete and toggle tasks.

    Every successful mutation writes exactly one activity in the same commit as
    the task change, then broadcasts the entity event followed by
    ``ActivityUpdate``.
    """

    def __init__(self, session, gateway):
        super().__init__(session, gateway)
        self.tasks = TaskRepository(session)

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_tasks(self) -> list[Task]:
        """All tasks with their notes, newest first."""
        return await self.tasks.list_all()

    async def get_task(self, task_id: UUID) -> Task | None:
        return await self.tasks.get(task_id)

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create(self, *, title: str, description: Optional[str] = None) -> Task:
        """Create a pending task."""
        validate_title(title)

        async with self._unit_of_work("create task"):
            task = await self.tasks.create(title=title, description=description)
            activity = await self.recorder.record(
                ActivityAction.TASK_CREATED, EntityType.TASK, task.id, task.title
            )

        self.gateway.notify_task_created(task)
        self.gateway.notify_activity_update(activity)

        metrics.inc_counter("tasks.created")
        logger.info(f"Task created: {task.title}")
        return task

    async def update(
        self,
        task_id: UUID,
        *,
        title: str,
        description: Optional[str] = None,
        is_completed: bool = False,
    ) -> Task | None:
        """Replace a task's editable fields. Returns None for an unknown id.

        A change of the completion flag is reported as a completion change
        (TaskCompleted/TaskUncompleted + ``TaskCompletionChanged``) instead of a
        plain update, even when other fields changed too.
        """
        validate_title(title)

        async with self._unit_of_work("update task"):
            existing = await self.tasks.get(task_id)
            if existing is None:
                return None

            completion_changed = existing.is_completed != is_completed
            task = await self.tasks.update(
                task_id,
                title=title,
                description=description,
                is_completed=is_completed,
            )
            if task is None:
                return None

            action = (
                ActivityAction.for_completion(task.is_completed)
                if completion_changed
                else ActivityAction.TASK_UPDATED
            )
            activity = await self.recorder.record(
                action, EntityType.TASK, task.id, task.title
            )

        if completion_changed:
            self.gateway.notify_task_completion_changed(task)
        else:
            self.gateway.notify_task_updated(task)
        self.gateway.notify_activity_update(activity)

        metrics.inc_counter("tasks.updated")
        logger.info(f"Task updated: {task.title}")
        return task

    async def delete(self, task_id: UUID) -> bool:
        """Delete a task and its notes. Returns False for an unknown id."""
        async with self._unit_of_work("delete task"):
            title = await self.tasks.get_title(task_id)
            if title is None:
                return False

            # Recorded before the row goes so the title is still at hand
            activity = await self.recorder.record(
                ActivityAction.TASK_DELETED, EntityType.TASK, task_id, title
            )
            await self.tasks.delete(task_id)

        self.gateway.notify_task_deleted(task_id)
        self.gateway.notify_activity_update(activity)

        metrics.inc_counter("tasks.deleted")
        logger.info(f"Task deleted: {title}")
        return True

    async def toggle_completion(self, task_id: UUID) -> bool:
        """Flip the completion flag. Returns False for an unknown id."""
        async with self._unit_of_work("toggle task completion"):
            existing = await self.tasks.get(task_id)
            if existing is None:
                return False

            task = await self.tasks.set_completion(task_id, not existing.is_completed)
            if task is None:
                return False

            activity = await self.recorder.record(
                ActivityAction.for_completion(task.is_completed),
                EntityType.TASK,
                task.id,
                task.title,
            )

        self.gateway.notify_task_completion_changed(task)
        self.gateway.notify_activity_update(activity)

        metrics.inc_counter("tasks.toggled")
        logger.info(
            f"Task {'completed' if task.is_completed else 'reopened'}: {task.title}"
        )
        return True
