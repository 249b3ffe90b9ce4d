from __future__ import annotations

import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.application.ports.snapshot_store import PersistenceError
from rbo.domain.common.ids import StoreId
from rbo.infrastructure.db.models.snapshot import Base, SnapshotModel
from rbo.infrastructure.snapshots.sql_store import SqlAlchemySnapshotStore

STORE = StoreId("str_001")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


def test_missing_snapshot_loads_as_none(engine) -> None:
    assert SqlAlchemySnapshotStore("catalog", engine=engine).load(STORE) is None


def test_save_then_load_and_overwrite(engine) -> None:
    store = SqlAlchemySnapshotStore("catalog", engine=engine)

    store.save(STORE, {"schemaVersion": 1, "categories": [{"name": "Pizzas 🍕"}]})
    store.save(STORE, {"schemaVersion": 1, "categories": []})

    assert store.load(STORE) == {"schemaVersion": 1, "categories": []}
    with Session(engine) as session:
        assert session.query(SnapshotModel).count() == 1


def test_namespaces_and_stores_are_isolated(engine) -> None:
    catalog = SqlAlchemySnapshotStore("catalog", engine=engine)
    orders = SqlAlchemySnapshotStore("orders", engine=engine)

    catalog.save(STORE, {"categories": []})
    orders.save(STORE, {"orders": []})

    assert catalog.load(STORE) == {"categories": []}
    assert orders.load(STORE) == {"orders": []}
    assert orders.load(StoreId("str_002")) is None


def test_invalid_json_row_raises_persistence_error(engine) -> None:
    with Session(engine) as session, session.begin():
        session.add(SnapshotModel(store_id=str(STORE), namespace="catalog", document="{oops"))

    with pytest.raises(PersistenceError):
        SqlAlchemySnapshotStore("catalog", engine=engine).load(STORE)


def test_unserializable_document_raises_persistence_error(engine) -> None:
    with pytest.raises(PersistenceError):
        SqlAlchemySnapshotStore("catalog", engine=engine).save(STORE, {"value": object()})


def test_database_errors_raise_persistence_error(engine) -> None:
    store = SqlAlchemySnapshotStore("orders", engine=engine)
    Base.metadata.drop_all(engine)

    with pytest.raises(PersistenceError):
        store.load(STORE)
    with pytest.raises(PersistenceError):
        store.save(STORE, {"orders": []})


def test_ping(engine) -> None:
    assert SqlAlchemySnapshotStore("catalog", engine=engine).ping() is True
