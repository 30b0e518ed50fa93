"""TaskHub HTTP and WebSocket API."""
