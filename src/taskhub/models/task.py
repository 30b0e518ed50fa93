"""Task model - a to-do item with its notes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from taskhub.models.note import Note


class Task(BaseModel):
    """Task entity. Owns its notes; deleting it deletes them."""

    id: UUID
    title: str
    description: Optional[str] = None
    is_completed: bool = False

    # Timestamps (updated_at >= created_at)
    created_at: datetime
    updated_at: datetime

    # Newest first
    notes: list[Note] = Field(default_factory=list)
