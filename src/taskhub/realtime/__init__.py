"""Real-time push channel: broadcast gateway and wire messages."""
