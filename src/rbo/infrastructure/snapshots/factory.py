from __future__ import annotations

import os

from rbo.application.ports.snapshot_store import SnapshotStore

CATALOG_NAMESPACE = "catalog"
ORDERS_NAMESPACE = "orders"


def snapshot_backend() -> str:
    return os.getenv("SNAPSHOT_BACKEND", "redis").strip().lower()


def build_snapshot_store(namespace: str) -> SnapshotStore:
    backend = snapshot_backend()
    if backend == "redis":
        from rbo.infrastructure.snapshots.redis_store import RedisSnapshotStore

        return RedisSnapshotStore(namespace=namespace)
    if backend == "sql":
        from rbo.infrastructure.snapshots.sql_store import SqlAlchemySnapshotStore

        return SqlAlchemySnapshotStore(namespace=namespace)
    raise RuntimeError(f"unsupported SNAPSHOT_BACKEND={backend!r}; expected 'redis' or 'sql'")
