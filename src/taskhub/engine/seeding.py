"""Demo data seeding.

Seeds a small set of tasks and notes that walk a first-time user through the
real-time features. Seeding writes rows directly and records no activities.
"""

import logging
from datetime import timedelta
from typing import Any
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db.repositories import ActivityRepository, NoteRepository, TaskRepository
from taskhub.db.tables import NoteTable, TaskTable
from taskhub.engine.errors import PersistenceError
from taskhub.utils.time import utc_now

logger = logging.getLogger(__name__)


# (title, description, is_completed, created minutes ago, updated minutes ago)
DEMO_TASKS: list[tuple[str, str, bool, int, int]] = [
    (
        "Welcome to TaskHub",
        "This is a sample task to demonstrate real-time updates. Try creating, "
        "editing, or completing tasks in multiple browser tabs!",
        False, 30, 30,
    ),
    (
        "Test Real-Time Collaboration",
        "Open this application in multiple browser tabs and watch updates happen "
        "in real-time across all tabs.",
        False, 25, 25,
    ),
    (
        "Add Notes to Tasks",
        "Try adding notes to this task and see them appear instantly in other "
        "browser tabs.",
        False, 20, 20,
    ),
    (
        "Toggle Task Completion",
        "Click the completion toggle and watch the dashboard statistics update "
        "in real-time.",
        True, 15, 10,
    ),
    (
        "Monitor Activity Feed",
        "Check the dashboard to see a live activity feed of all changes happening "
        "in the system.",
        False, 10, 10,
    ),
    (
        "Create Your Own Task",
        "Feel free to create your own tasks and notes to test the real-time "
        "functionality!",
        False, 5, 5,
    ),
]

# (index into DEMO_TASKS, content, created minutes ago)
DEMO_NOTES: list[tuple[int, str, int]] = [
    (0, "This note was added during demo setup. Try adding your own notes!", 28),
    (
        0,
        "Notes update in real-time too! Open multiple tabs and add notes to see "
        "the magic happen.",
        25,
    ),
    (2, "Here's an example note attached to this task.", 18),
    (
        2,
        "You can add multiple notes to each task. Each note will broadcast to all "
        "connected clients instantly!",
        15,
    ),
    (2, "Try editing or deleting notes in one tab and watch the changes in another tab.", 12),
]

DEMO_INFO: dict[str, Any] = {
    "purpose": "TaskHub Real-Time Task Management Demo",
    "features": [
        "Real-time task creation and updates",
        "Live note collaboration",
        "Instant dashboard statistics",
        "Multi-client synchronization",
        "Activity feed updates",
    ],
    "instructions": [
        "Open multiple browser tabs to see real-time updates",
        "Create tasks and notes in one tab, watch them appear in others",
        "Toggle task completion to see dashboard statistics update",
        "Check the dashboard for live activity feed",
        "Use /api/demo/reset to clear data and start fresh",
    ],
    "endpoints": {
        "seed": "POST /api/demo/seed - Add demo data if database is empty",
        "reset": "POST /api/demo/reset - Clear all data and reseed",
        "info": "GET /api/demo/info - This information",
    },
}


class DemoDataSeeder:
    """Seeds and resets demo data."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tasks = TaskRepository(session)
        self.notes = NoteRepository(session)
        self.activities = ActivityRepository(session)

    async def seed(self) -> bool:
        """Insert the demo tasks and notes unless any task exists.

        Returns True when data was inserted.
        """
        try:
            inserted = await self._seed()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error occurred while seeding demo data: {e}")
            raise PersistenceError("seed demo data") from e
        return inserted

    async def reset(self) -> None:
        """Delete every note, task and activity, then seed again."""
        logger.info("Resetting demo data...")
        try:
            await self.notes.delete_all()
            await self.tasks.delete_all()
            await self.activities.delete_all()
            await self._seed()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error occurred while resetting demo data: {e}")
            raise PersistenceError("reset demo data") from e
        logger.info("Demo data reset successfully")

    async def _seed(self) -> bool:
        if await self.tasks.count() > 0:
            logger.info("Database already contains data, skipping seeding")
            return False

        logger.info("Seeding demo data...")
        now = utc_now()

        task_rows = [
            TaskTable(
                id=uuid4(),
                title=title,
                description=description,
                is_completed=is_completed,
                created_at=now - timedelta(minutes=created_ago),
                updated_at=now - timedelta(minutes=updated_ago),
            )
            for title, description, is_completed, created_ago, updated_ago in DEMO_TASKS
        ]
        self.session.add_all(task_rows)
        await self.session.flush()

        note_rows = [
            NoteTable(
                id=uuid4(),
                task_id=task_rows[index].id,
                content=content,
                created_at=now - timedelta(minutes=created_ago),
            )
            for index, content, created_ago in DEMO_NOTES
        ]
        self.session.add_all(note_rows)
        await self.session.flush()

        logger.info(
            f"Demo data seeded successfully. Added {len(task_rows)} tasks "
            f"and {len(note_rows)} notes"
        )
        return True
