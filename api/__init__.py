"""
Signal API Package.

HTTP surface for the sentiment signal:
- GET /api/signal  computed signal (force query flag bypasses the cache)
- GET /health      liveness and engine status
"""

from api.main import create_app


__all__ = ["create_app"]
