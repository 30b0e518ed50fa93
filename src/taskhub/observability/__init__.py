"""Observability helpers for TaskHub."""

from taskhub.observability.metrics import metrics
from taskhub.observability.trace import TraceIdFilter, get_trace_id, set_trace_id

__all__ = ["metrics", "TraceIdFilter", "get_trace_id", "set_trace_id"]
