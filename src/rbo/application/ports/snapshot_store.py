from __future__ import annotations

from typing import Any, Protocol

from rbo.domain.common.ids import StoreId

SnapshotDocument = dict[str, Any]


class SnapshotStore(Protocol):
    """Whole-document persistence for one concern (catalog, orders) keyed by store."""

    namespace: str

    def load(self, store_id: StoreId) -> SnapshotDocument | list[Any] | None: ...

    def save(self, store_id: StoreId, document: SnapshotDocument) -> None: ...

    def ping(self) -> bool: ...


class PersistenceError(Exception):
    def __init__(self, message: str, namespace: str, store_id: str | None = None) -> None:
        super().__init__(message)
        self.namespace = namespace
        self.store_id = store_id
