"""TaskHub engine - mutation services, audit recorder and dashboard rollups."""

from taskhub.engine.activity import ActivityRecorder
from taskhub.engine.dashboard import DashboardAggregator
from taskhub.engine.errors import (
    BroadcastError,
    ErrorKind,
    NotFoundError,
    PersistenceError,
    TaskHubError,
    ValidationError,
)
from taskhub.engine.notes import NoteService
from taskhub.engine.seeding import DemoDataSeeder
from taskhub.engine.tasks import TaskService

__all__ = [
    "ActivityRecorder",
    "BroadcastError",
    "DashboardAggregator",
    "DemoDataSeeder",
    "ErrorKind",
    "NoteService",
    "NotFoundError",
    "PersistenceError",
    "TaskHubError",
    "TaskService",
    "ValidationError",
]
