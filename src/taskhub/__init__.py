"""TaskHub: real-time task and note management service."""

__version__ = "0.1.0"
