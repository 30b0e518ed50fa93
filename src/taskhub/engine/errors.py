"""TaskHub engine errors.

Every error carries an ``ErrorKind`` tag; the HTTP boundary maps kinds to status
codes instead of matching on exception classes.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Error taxonomy shared by services and the API boundary."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"
    BROADCAST = "broadcast"


class TaskHubError(Exception):
    """Base error for TaskHub operations."""

    kind: ErrorKind = ErrorKind.PERSISTENCE

    def __init__(self, message: str, code: str = "TASKHUB_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(TaskHubError):
    """Input rejected before anything was written."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field


class NotFoundError(TaskHubError):
    """Referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} not found: {entity_id}", f"{entity.upper()}_NOT_FOUND")
        self.entity = entity
        self.entity_id = entity_id


class PersistenceError(TaskHubError):
    """Store unavailable or constraint violated; the mutation was rolled back."""

    kind = ErrorKind.PERSISTENCE

    def __init__(self, operation: str):
        super().__init__(f"Database operation failed: {operation}", "PERSISTENCE_ERROR")
        self.operation = operation


class BroadcastError(TaskHubError):
    """Delivery to a real-time subscriber failed. Never leaves the gateway."""

    kind = ErrorKind.BROADCAST

    def __init__(self, connection_id: str, reason: str):
        super().__init__(f"Broadcast to {connection_id} failed: {reason}", "BROADCAST_ERROR")
        self.connection_id = connection_id
        self.reason = reason
