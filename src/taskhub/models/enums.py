"""TaskHub enumerations."""

from enum import Enum


class ActivityAction(str, Enum):
    """Kind of mutation recorded in the activity log."""

    TASK_CREATED = "TaskCreated"
    TASK_UPDATED = "TaskUpdated"
    TASK_DELETED = "TaskDeleted"
    TASK_COMPLETED = "TaskCompleted"
    TASK_UNCOMPLETED = "TaskUncompleted"
    NOTE_CREATED = "NoteCreated"
    NOTE_UPDATED = "NoteUpdated"
    NOTE_DELETED = "NoteDeleted"

    @classmethod
    def for_completion(cls, is_completed: bool) -> "ActivityAction":
        """Return the action matching a task's new completion state."""
        return cls.TASK_COMPLETED if is_completed else cls.TASK_UNCOMPLETED

    @property
    def display_name(self) -> str:
        """Human label, e.g. ``Task Uncompleted``."""
        prefix = "Task" if self.value.startswith("Task") else "Note"
        return f"{prefix} {self.value[len(prefix):]}"


class EntityType(str, Enum):
    """Subject type of an activity."""

    TASK = "Task"
    NOTE = "Note"


class BroadcastEvent(str, Enum):
    """Named events pushed over the real-time channel."""

    CONNECTED = "Connected"
    TASK_CREATED = "TaskCreated"
    TASK_UPDATED = "TaskUpdated"
    TASK_DELETED = "TaskDeleted"
    TASK_COMPLETION_CHANGED = "TaskCompletionChanged"
    NOTE_ADDED = "NoteAdded"
    NOTE_UPDATED = "NoteUpdated"
    NOTE_DELETED = "NoteDeleted"
    ACTIVITY_UPDATE = "ActivityUpdate"
