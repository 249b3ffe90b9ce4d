from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rbo.application.ports.snapshot_store import PersistenceError, SnapshotDocument
from rbo.domain.common.ids import StoreId
from rbo.infrastructure.db.models.snapshot import SnapshotModel
from rbo.infrastructure.db.session import get_engine, ping_engine


class SqlAlchemySnapshotStore:
    """Snapshot documents as JSON text in the ``snapshots`` table, one row per store and namespace."""

    def __init__(self, namespace: str, engine: Engine | None = None) -> None:
        self.namespace = namespace
        self._engine = engine or get_engine()

    def load(self, store_id: StoreId) -> SnapshotDocument | list[Any] | None:
        statement = select(SnapshotModel.document).where(
            SnapshotModel.store_id == str(store_id),
            SnapshotModel.namespace == self.namespace,
        )
        try:
            with Session(self._engine) as session:
                raw = session.execute(statement).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"failed to read snapshot: {exc}", namespace=self.namespace, store_id=str(store_id)
            ) from exc

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise PersistenceError(
                f"snapshot does not hold valid JSON: {exc}",
                namespace=self.namespace,
                store_id=str(store_id),
            ) from exc

    def save(self, store_id: StoreId, document: SnapshotDocument) -> None:
        try:
            payload = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(
                f"snapshot is not serializable: {exc}",
                namespace=self.namespace,
                store_id=str(store_id),
            ) from exc

        now = datetime.now(timezone.utc)
        try:
            with Session(self._engine) as session, session.begin():
                model = session.get(SnapshotModel, (str(store_id), self.namespace))
                if model is None:
                    session.add(
                        SnapshotModel(
                            store_id=str(store_id),
                            namespace=self.namespace,
                            document=payload,
                            updated_at=now,
                        )
                    )
                else:
                    model.document = payload
                    model.updated_at = now
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"failed to write snapshot: {exc}", namespace=self.namespace, store_id=str(store_id)
            ) from exc

    def ping(self) -> bool:
        return ping_engine(self._engine)
