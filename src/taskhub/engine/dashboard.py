"""Dashboard aggregator - read-only rollups over tasks, notes and activities."""

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.config import settings
from taskhub.db.repositories import NoteRepository, TaskRepository
from taskhub.engine.activity import ActivityRecorder
from taskhub.models import Activity, DashboardSummary


class DashboardAggregator:
    """Computes dashboard statistics on demand. Nothing is cached."""

    def __init__(self, session: AsyncSession):
        self.tasks = TaskRepository(session)
        self.notes = NoteRepository(session)
        self.recorder = ActivityRecorder(session)

    async def get_summary(self) -> DashboardSummary:
        total_tasks = await self.tasks.count()
        completed_tasks = await self.tasks.count(completed=True)
        total_notes = await self.notes.count()
        recent = await self.recorder.recent(settings.dashboard_activity_count)

        return DashboardSummary.from_counts(
            total_tasks=total_tasks,
            completed_tasks=completed_tasks,
            total_notes=total_notes,
            recent_activities=recent,
        )

    async def get_recent_activities(self, count: int) -> list[Activity]:
        """Most recent activities first.

        Out-of-range counts (zero, negative, or at least ``max_activity_count``)
        fall back to the default page size instead of being rejected.
        """
        return await self.recorder.recent(page_size(count))


def page_size(count: int) -> int:
    if 0 < count < settings.max_activity_count:
        return count
    return settings.default_activity_count
