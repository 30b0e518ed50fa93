"""Database repositories for TaskHub entities."""

from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskhub.db.tables import ActivityTable, NoteTable, TaskTable
from taskhub.models import Activity, ActivityAction, EntityType, Note, Task
from taskhub.utils.time import ensure_utc, utc_now


class TaskRepository:
    """Repository for task rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, title: str, description: str | None = None) -> Task:
        """Insert a new, not yet completed task."""
        now = utc_now()
        task_row = TaskTable(
            id=uuid4(),
            title=title,
            description=description,
            is_completed=False,
            created_at=now,
            updated_at=now,
        )
        self.session.add(task_row)
        await self.session.flush()
        return self._row_to_model(task_row, notes=[])

    async def get(self, task_id: UUID) -> Task | None:
        """Get a task with its notes."""
        result = await self.session.execute(
            select(TaskTable)
            .options(selectinload(TaskTable.notes))
            .where(TaskTable.id == task_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def get_title(self, task_id: UUID) -> str | None:
        """Return the task's title, or None when the task does not exist."""
        result = await self.session.execute(
            select(TaskTable.title).where(TaskTable.id == task_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Task]:
        """List all tasks, newest first."""
        result = await self.session.execute(
            select(TaskTable)
            .options(selectinload(TaskTable.notes))
            .order_by(TaskTable.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return [self._row_to_model(row) for row in result.scalars().all()]

    async def update(
        self,
        task_id: UUID,
        title: str,
        description: str | None,
        is_completed: bool,
    ) -> Task | None:
        """Overwrite the editable fields and bump updated_at."""
        return await self._apply(
            task_id,
            {
                "title": title,
                "description": description,
                "is_completed": is_completed,
            },
        )

    async def set_completion(self, task_id: UUID, is_completed: bool) -> Task | None:
        """Set the completion flag and bump updated_at."""
        return await self._apply(task_id, {"is_completed": is_completed})

    async def delete(self, task_id: UUID) -> bool:
        """Delete a task; its notes go with it."""
        result = await self.session.execute(
            delete(TaskTable).where(TaskTable.id == task_id)
        )
        return result.rowcount > 0

    async def delete_all(self) -> int:
        result = await self.session.execute(delete(TaskTable))
        return result.rowcount

    async def count(self, completed: bool | None = None) -> int:
        """Count tasks, optionally only completed (True) or pending (False) ones."""
        query = select(func.count()).select_from(TaskTable)
        if completed is not None:
            query = query.where(TaskTable.is_completed == completed)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def _apply(self, task_id: UUID, values: dict[str, Any]) -> Task | None:
        values["updated_at"] = utc_now()
        result = await self.session.execute(
            update(TaskTable).where(TaskTable.id == task_id).values(**values)
        )
        if result.rowcount == 0:
            return None
        return await self.get(task_id)

    def _row_to_model(self, row: TaskTable, notes: list[Note] | None = None) -> Task:
        """Convert database row to model."""
        if notes is None:
            notes = [NoteRepository.row_to_model(n) for n in row.notes]
        return Task(
            id=row.id,
            title=row.title,
            description=row.description,
            is_completed=row.is_completed,
            created_at=ensure_utc(row.created_at),
            updated_at=ensure_utc(row.updated_at),
            notes=notes,
        )


class NoteRepository:
    """Repository for note rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, task_id: UUID, content: str) -> Note:
        """Insert a note. The caller has checked that the task exists."""
        note_row = NoteTable(
            id=uuid4(),
            task_id=task_id,
            content=content,
            created_at=utc_now(),
        )
        self.session.add(note_row)
        await self.session.flush()
        return self.row_to_model(note_row)

    async def get(self, note_id: UUID) -> Note | None:
        """Get a note by ID."""
        result = await self.session.execute(
            select(NoteTable).where(NoteTable.id == note_id)
        )
        row = result.scalar_one_or_none()
        return self.row_to_model(row) if row else None

    async def get_with_task_title(self, note_id: UUID) -> tuple[Note, str] | None:
        """Get a note together with its owning task's title."""
        result = await self.session.execute(
            select(NoteTable, TaskTable.title)
            .join(TaskTable, NoteTable.task_id == TaskTable.id)
            .where(NoteTable.id == note_id)
        )
        found = result.one_or_none()
        if found is None:
            return None
        row, title = found
        return self.row_to_model(row), title

    async def list_for_task(self, task_id: UUID) -> list[Note]:
        """List a task's notes, newest first."""
        result = await self.session.execute(
            select(NoteTable)
            .where(NoteTable.task_id == task_id)
            .order_by(NoteTable.created_at.desc())
        )
        return [self.row_to_model(row) for row in result.scalars().all()]

    async def update_content(self, note_id: UUID, content: str) -> Note | None:
        """Replace a note's content."""
        result = await self.session.execute(
            update(NoteTable).where(NoteTable.id == note_id).values(content=content)
        )
        if result.rowcount == 0:
            return None
        return await self.get(note_id)

    async def delete(self, note_id: UUID) -> bool:
        result = await self.session.execute(
            delete(NoteTable).where(NoteTable.id == note_id)
        )
        return result.rowcount > 0

    async def delete_all(self) -> int:
        result = await self.session.execute(delete(NoteTable))
        return result.rowcount

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(NoteTable))
        return result.scalar_one()

    @staticmethod
    def row_to_model(row: NoteTable) -> Note:
        """Convert database row to model."""
        return Note(
            id=row.id,
            task_id=row.task_id,
            content=row.content,
            created_at=ensure_utc(row.created_at),
        )


class ActivityRepository:
    """Repository for the append-only activity log."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        action: ActivityAction,
        entity_type: EntityType,
        entity_id: UUID,
        entity_title: str,
        description: str,
        additional_data: dict[str, Any] | None = None,
    ) -> Activity:
        """Append an activity entry."""
        activity_row = ActivityTable(
            id=uuid4(),
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_title=entity_title,
            description=description,
            additional_data=additional_data,
            created_at=utc_now(),
        )
        self.session.add(activity_row)
        await self.session.flush()
        return self._row_to_model(activity_row)

    async def list_recent(self, limit: int) -> list[Activity]:
        """Most recent activities first."""
        result = await self.session.execute(
            select(ActivityTable).order_by(ActivityTable.created_at.desc()).limit(limit)
        )
        return [self._row_to_model(row) for row in result.scalars().all()]

    async def delete_all(self) -> int:
        """Wipe the log. Only used by a full data reset."""
        result = await self.session.execute(delete(ActivityTable))
        return result.rowcount

    def _row_to_model(self, row: ActivityTable) -> Activity:
        """Convert database row to model."""
        return Activity(
            id=row.id,
            action=ActivityAction(row.action),
            entity_type=EntityType(row.entity_type),
            entity_id=row.entity_id,
            entity_title=row.entity_title,
            description=row.description,
            additional_data=row.additional_data,
            created_at=ensure_utc(row.created_at),
        )
