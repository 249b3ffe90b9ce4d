from __future__ import annotations

import json
from typing import Any

import redis

from rbo.application.ports.snapshot_store import PersistenceError, SnapshotDocument
from rbo.domain.common.ids import StoreId
from rbo.infrastructure.cache.redis_client import get_redis_client, ping_client


def snapshot_key(namespace: str, store_id: str) -> str:
    return f"snapshot:{namespace}:{store_id}"


class RedisSnapshotStore:
    """One JSON string value per store under ``snapshot:{namespace}:{store_id}``."""

    def __init__(
        self,
        namespace: str,
        client: redis.Redis | None = None,
        timeout_seconds: float = 1.0,
    ) -> None:
        self.namespace = namespace
        self._client = client
        self._timeout_seconds = timeout_seconds

    def _redis(self) -> redis.Redis:
        if self._client is not None:
            return self._client
        return get_redis_client(timeout_seconds=self._timeout_seconds)

    def load(self, store_id: StoreId) -> SnapshotDocument | list[Any] | None:
        key = snapshot_key(self.namespace, str(store_id))
        try:
            raw = self._redis().get(key)
        except (redis.RedisError, RuntimeError, OSError, ValueError) as exc:
            raise PersistenceError(
                f"failed to read {key}: {exc}", namespace=self.namespace, store_id=str(store_id)
            ) from exc
        if raw is None:
            return None
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            return json.loads(raw)
        except ValueError as exc:
            raise PersistenceError(
                f"{key} does not hold valid JSON: {exc}",
                namespace=self.namespace,
                store_id=str(store_id),
            ) from exc

    def save(self, store_id: StoreId, document: SnapshotDocument) -> None:
        key = snapshot_key(self.namespace, str(store_id))
        try:
            payload = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
            self._redis().set(key, payload)
        except (redis.RedisError, RuntimeError, OSError, TypeError, ValueError) as exc:
            raise PersistenceError(
                f"failed to write {key}: {exc}", namespace=self.namespace, store_id=str(store_id)
            ) from exc

    def ping(self) -> bool:
        try:
            return ping_client(self._redis())
        except RuntimeError:
            return False
