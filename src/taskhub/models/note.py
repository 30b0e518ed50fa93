"""Note model - free-text annotation on one task."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class Note(BaseModel):
    """Note attached to exactly one task."""

    id: UUID
    task_id: UUID
    content: str
    created_at: datetime
