from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

from rbo.application.metrics.back_office import record_snapshot_failure
from rbo.application.ports.snapshot_store import PersistenceError, SnapshotDocument, SnapshotStore
from rbo.domain.common.ids import StoreId

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TenantSnapshots(Generic[T]):
    """Per-store working copies of a snapshot-backed aggregate.

    The first access for a store reads its snapshot; afterwards the in-memory copy
    is authoritative and every commit rewrites the whole document. A failed write
    keeps the in-memory change and reports ``saved=False``.
    """

    def __init__(
        self,
        store: SnapshotStore,
        decode: Callable[[StoreId, Any], T],
        encode: Callable[[T], SnapshotDocument],
        fallback: Callable[[StoreId], T],
    ) -> None:
        self._store = store
        self._decode = decode
        self._encode = encode
        self._fallback = fallback
        self._current: dict[StoreId, T] = {}
        self.lock = threading.RLock()

    @property
    def namespace(self) -> str:
        return self._store.namespace

    def get(self, store_id: StoreId) -> T:
        with self.lock:
            if store_id not in self._current:
                self._current[store_id] = self._load(store_id)
            return self._current[store_id]

    def replace(self, store_id: StoreId, value: T) -> None:
        """Swap the working copy without writing (UI-only state)."""
        with self.lock:
            self._current[store_id] = value

    def commit(self, store_id: StoreId, value: T) -> bool:
        with self.lock:
            self._current[store_id] = value
            try:
                self._store.save(store_id, self._encode(value))
            except PersistenceError as exc:
                record_snapshot_failure(namespace=self.namespace, operation="write")
                logger.warning(
                    "snapshot_write_failed",
                    extra={"store_id": str(store_id), "namespace": self.namespace, "reason": str(exc)},
                )
                return False
            return True

    def evict(self, store_id: StoreId) -> None:
        with self.lock:
            self._current.pop(store_id, None)

    def _load(self, store_id: StoreId) -> T:
        try:
            document = self._store.load(store_id)
            if document is None:
                return self._fallback(store_id)
            return self._decode(store_id, document)
        except PersistenceError as exc:
            record_snapshot_failure(namespace=self.namespace, operation="read")
            logger.warning(
                "snapshot_read_failed",
                extra={"store_id": str(store_id), "namespace": self.namespace, "reason": str(exc)},
            )
            return self._fallback(store_id)
