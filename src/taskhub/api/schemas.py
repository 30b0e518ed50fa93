"""API request/response schemas.

Wire format is camelCase (``isCompleted``, ``taskId``); Python code uses the
snake_case field names.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskhub.models import Activity, DashboardSummary, EntityType, ActivityAction


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Requests
# ============================================================================
# Only the fields listed here can be set by a client; ids and timestamps are
# always assigned by the server.


class CreateTaskRequest(CamelModel):
    """Create task request."""

    title: str = Field(..., max_length=255, description="Task title (non-blank)")
    description: Optional[str] = Field(None, description="Optional description")


class UpdateTaskRequest(CamelModel):
    """Update task request. All editable fields are replaced."""

    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    is_completed: bool = False


class CreateNoteRequest(CamelModel):
    """Create note request."""

    task_id: UUID
    content: str


class UpdateNoteRequest(CamelModel):
    """Update note request."""

    content: str


# ============================================================================
# Responses
# ============================================================================


class NoteResponse(CamelModel):
    """Note response."""

    id: UUID
    task_id: UUID
    content: str
    created_at: datetime


class TaskResponse(CamelModel):
    """Task response, including its notes."""

    id: UUID
    title: str
    description: Optional[str] = None
    is_completed: bool
    created_at: datetime
    updated_at: datetime
    notes: list[NoteResponse] = Field(default_factory=list)


class ActivityResponse(CamelModel):
    """Activity feed entry."""

    id: UUID
    action: ActivityAction
    entity_type: EntityType
    entity_id: UUID
    entity_title: str
    description: str
    created_at: datetime
    additional_data: Optional[dict[str, Any]] = None
    action_display_name: str
    entity_type_display_name: str

    @classmethod
    def from_model(cls, activity: Activity) -> "ActivityResponse":
        return cls(
            **activity.model_dump(),
            action_display_name=activity.action.display_name,
            entity_type_display_name=activity.entity_type.value,
        )


class DashboardResponse(CamelModel):
    """Dashboard statistics and latest activity."""

    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    total_notes: int
    completion_rate: float
    notes_per_task: int
    recent_activities: list[ActivityResponse]

    @classmethod
    def from_model(cls, summary: DashboardSummary) -> "DashboardResponse":
        return cls(
            **summary.model_dump(exclude={"recent_activities"}),
            recent_activities=[
                ActivityResponse.from_model(a) for a in summary.recent_activities
            ],
        )


class HealthCheckEntry(CamelModel):
    name: str
    status: str
    error: Optional[str] = None
    duration_ms: float


class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    version: str
    checks: Optional[list[HealthCheckEntry]] = None
    metrics: Optional[dict[str, Any]] = None


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
