from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rbo.application.use_cases.catalog_model import CatalogModel
from rbo.domain.common.ids import CategoryId, StoreId
from rbo.infrastructure.cache.redis_client import get_redis_client
from rbo.infrastructure.snapshots.redis_store import RedisSnapshotStore, snapshot_key
from rbo.tools.seed import seed_catalog

STORE = StoreId("str_it")


def test_catalog_changes_survive_a_restart() -> None:
    first = CatalogModel(RedisSnapshotStore("catalog"), currency="BRL")
    change = first.create_category(STORE, "Sobremesas", icon="🍰")
    assert change.saved is True

    restarted = CatalogModel(RedisSnapshotStore("catalog"), currency="BRL")
    catalog = restarted.current(STORE)

    assert [c.name for c in catalog.categories] == [
        "Pizzas Tradicionais",
        "Bebidas",
        "Sobremesas",
    ]
    assert catalog.find_category(CategoryId(change.created_ids[0])).icon == "🍰"


def test_corrupt_snapshot_falls_back_to_seed() -> None:
    get_redis_client().set(snapshot_key("catalog", str(STORE)), "{not json")

    catalog = CatalogModel(RedisSnapshotStore("catalog"), currency="BRL").current(STORE)

    assert [c.name for c in catalog.categories] == ["Pizzas Tradicionais", "Bebidas"]


def test_seed_does_not_overwrite_without_force() -> None:
    store = RedisSnapshotStore("catalog")
    model = CatalogModel(store, currency="BRL")
    model.delete_category(STORE, CategoryId(2))

    assert seed_catalog(store, STORE) is False
    assert [c["name"] for c in store.load(STORE)["categories"]] == ["Pizzas Tradicionais"]

    assert seed_catalog(store, STORE, force=True) is True
    assert len(store.load(STORE)["categories"]) == 2
