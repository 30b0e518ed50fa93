"""HTTP middleware and exception handlers."""

from taskhub.middleware.errors import register_exception_handlers
from taskhub.middleware.security import security_headers_middleware
from taskhub.middleware.trace import trace_id_middleware

__all__ = [
    "register_exception_handlers",
    "security_headers_middleware",
    "trace_id_middleware",
]
