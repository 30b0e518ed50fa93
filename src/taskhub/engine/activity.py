"""Audit recorder - appends one Activity per successful mutation."""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db.repositories import ActivityRepository
from taskhub.models import Activity, ActivityAction, EntityType
from taskhub.observability.metrics import metrics

logger = logging.getLogger(__name__)


DESCRIPTION_TEMPLATES: dict[ActivityAction, str] = {
    ActivityAction.TASK_CREATED: "Task '{title}' was created",
    ActivityAction.TASK_UPDATED: "Task '{title}' was updated",
    ActivityAction.TASK_DELETED: "Task '{title}' was deleted",
    ActivityAction.TASK_COMPLETED: "Task '{title}' was completed",
    ActivityAction.TASK_UNCOMPLETED: "Task '{title}' was marked as pending",
    ActivityAction.NOTE_CREATED: "Note was added to task '{title}'",
    ActivityAction.NOTE_UPDATED: "Note was updated in task '{title}'",
    ActivityAction.NOTE_DELETED: "Note was deleted from task '{title}'",
}


def describe(action: ActivityAction, entity_title: str) -> str:
    """Default human description for an action."""
    return DESCRIPTION_TEMPLATES[action].format(title=entity_title)


class ActivityRecorder:
    """Writes activity rows inside the caller's transaction.

    Nothing is committed here: the mutation service commits the entity write and
    its activity together, so a failed audit write rejects the whole mutation.
    """

    def __init__(self, session: AsyncSession):
        self.activities = ActivityRepository(session)

    async def record(
        self,
        action: ActivityAction,
        entity_type: EntityType,
        entity_id: UUID,
        entity_title: str,
        description: Optional[str] = None,
        additional_data: Optional[dict[str, Any]] = None,
    ) -> Activity:
        """Append an activity; ``description`` defaults to the action's template."""
        if description is None:
            description = describe(action, entity_title)

        activity = await self.activities.create(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_title=entity_title,
            description=description,
            additional_data=additional_data,
        )
        metrics.inc_counter("activity.recorded")
        logger.debug(f"Activity recorded: {action.value} for {entity_type.value} {entity_id}")
        return activity

    async def recent(self, count: int) -> list[Activity]:
        """The ``count`` most recent activities, newest first."""
        return await self.activities.list_recent(count)
