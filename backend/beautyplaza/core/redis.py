# backend/beautyplaza/core/redis.py
"""
Synchronous Redis client used for shared ephemeral state (OTP challenges).

Services run in worker threads via ``asyncio.to_thread``, so the blocking
client is the right fit here.
"""

import logging
import threading
from typing import Optional

import redis

from .config import settings

logger = logging.getLogger(__name__)

_client: Optional[redis.Redis] = None
_client_lock = threading.Lock()


def get_redis() -> redis.Redis:
    """Return the process-wide Redis client, creating it on first use."""
    global _client
    if _client is not None:
        return _client
    with _client_lock:
        if _client is None:
            _client = redis.Redis.from_url(settings.redis_url, decode_responses=True)
            logger.info("Redis client created for %s", settings.redis_url.split("@")[-1])
    return _client


__all__ = ["get_redis"]
