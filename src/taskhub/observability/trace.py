"""Request trace ids shared by logs, responses and error envelopes."""

import logging
from contextvars import ContextVar
from typing import Optional
from uuid import uuid4

_trace_id: ContextVar[Optional[str]] = ContextVar("taskhub_trace_id", default=None)


def get_trace_id() -> Optional[str]:
    """Return the trace id bound to the current context, if any."""
    return _trace_id.get()


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Bind a trace id to the current context, generating one when missing."""
    value = trace_id or uuid4().hex
    _trace_id.set(value)
    return value


class TraceIdFilter(logging.Filter):
    """Expose the current trace id to log formatters as ``%(trace_id)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id() or "-"
        return True
