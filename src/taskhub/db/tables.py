"""SQLAlchemy table definitions."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.db.base import Base
from taskhub.models.enums import ActivityAction, EntityType

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB, "postgresql")


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class TaskTable(Base):
    """Tasks table."""

    __tablename__ = "tasks"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Notes go with the task (ON DELETE CASCADE does the work in the database)
    notes: Mapped[list["NoteTable"]] = relationship(
        "NoteTable",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: NoteTable.created_at.desc(),
    )

    __table_args__ = (
        Index("idx_tasks_created", "created_at"),
        Index("idx_tasks_completed", "is_completed"),
    )


class NoteTable(Base):
    """Notes table - always owned by one task."""

    __tablename__ = "notes"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    task_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    task: Mapped[TaskTable] = relationship("TaskTable", back_populates="notes")

    __table_args__ = (
        Index("idx_notes_task", "task_id", "created_at"),
    )


class ActivityTable(Base):
    """Activities table - append-only audit log."""

    __tablename__ = "activities"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    action: Mapped[ActivityAction] = mapped_column(
        Enum(ActivityAction, name="activityaction", values_callable=_enum_values),
        nullable=False,
    )
    entity_type: Mapped[EntityType] = mapped_column(
        Enum(EntityType, name="entitytype", values_callable=_enum_values),
        nullable=False,
    )
    # Not a foreign key: the subject may be deleted later
    entity_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    entity_title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    additional_data: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_activities_created", "created_at"),
        Index("idx_activities_entity", "entity_type", "entity_id"),
    )
