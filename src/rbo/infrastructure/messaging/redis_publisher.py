from __future__ import annotations

import redis

from rbo.infrastructure.cache.redis_client import get_redis_client


class RedisEventPublisher:
    def __init__(self, client: redis.Redis | None = None, timeout_seconds: float = 1.0) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        client = self._client or get_redis_client(timeout_seconds=self._timeout_seconds)
        client.publish(channel, message)
