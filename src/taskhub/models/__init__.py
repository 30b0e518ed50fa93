"""TaskHub data models."""

from taskhub.models.enums import ActivityAction, BroadcastEvent, EntityType
from taskhub.models.note import Note
from taskhub.models.task import Task
from taskhub.models.activity import Activity
from taskhub.models.dashboard import DashboardSummary

__all__ = [
    "Activity",
    "ActivityAction",
    "BroadcastEvent",
    "DashboardSummary",
    "EntityType",
    "Note",
    "Task",
]
