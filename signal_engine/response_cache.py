"""
Signal Engine - Response Cache.

Single-slot memo of the last computed payload. A hit requires the entry to
be younger than the TTL and no force refresh. A TTL of 0 disables caching.
"""

import logging
from typing import Optional

from .models import SignalResponse


logger = logging.getLogger(__name__)


class ResponseCache:

    def __init__(self, ttl_seconds: float) -> None:
        self.ttl_seconds = max(0.0, ttl_seconds)
        self._payload: Optional[SignalResponse] = None
        self._stored_at: float = 0.0

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, now: float, force: bool = False) -> Optional[SignalResponse]:
        if force or not self.enabled or self._payload is None:
            return None
        if now - self._stored_at >= self.ttl_seconds:
            return None
        logger.debug(f"Response cache hit ({now - self._stored_at:.1f}s old)")
        return self._payload

    def store(self, payload: SignalResponse, now: float) -> None:
        if not self.enabled:
            return
        self._payload = payload
        self._stored_at = now

    def clear(self) -> None:
        self._payload = None
        self._stored_at = 0.0
