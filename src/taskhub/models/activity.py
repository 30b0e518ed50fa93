"""Activity model - immutable audit entry for one past mutation."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel

from taskhub.models.enums import ActivityAction, EntityType


class Activity(BaseModel):
    """Audit trail entry.

    ``entity_title`` is a snapshot taken when the mutation happened, so the entry
    stays readable after its subject has been deleted.
    """

    id: UUID
    action: ActivityAction
    entity_type: EntityType
    entity_id: UUID
    entity_title: str
    description: str
    created_at: datetime
    additional_data: Optional[dict[str, Any]] = None
