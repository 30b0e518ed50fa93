"""TaskHub database layer."""

from taskhub.db.base import Base, build_engine, get_session, init_db
from taskhub.db.tables import ActivityTable, NoteTable, TaskTable

__all__ = [
    "Base",
    "build_engine",
    "get_session",
    "init_db",
    "ActivityTable",
    "NoteTable",
    "TaskTable",
]
