from __future__ import annotations

import sys
from datetime import datetime, timezone

from rbo.application.mappers.snapshot_codec import catalog_to_document
from rbo.application.ports.snapshot_store import SnapshotStore
from rbo.application.use_cases.catalog_model import default_currency
from rbo.domain.catalog.seed import default_catalog
from rbo.domain.common.ids import StoreId
from rbo.infrastructure.snapshots.factory import CATALOG_NAMESPACE, build_snapshot_store

DEFAULT_STORE_ID = "str_001"


def seed_catalog(store: SnapshotStore, store_id: StoreId, force: bool = False) -> bool:
    if not force and store.load(store_id) is not None:
        return False
    catalog = default_catalog(store_id, default_currency(), datetime.now(timezone.utc))
    store.save(store_id, catalog_to_document(catalog))
    return True


def main(argv: list[str] | None = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    force = "--force" in args
    positional = [arg for arg in args if not arg.startswith("--")]
    store_id = StoreId(positional[0] if positional else DEFAULT_STORE_ID)

    written = seed_catalog(build_snapshot_store(CATALOG_NAMESPACE), store_id, force=force)
    if written:
        print(f"seeded default catalog for {store_id}")
    else:
        print(f"catalog already exists for {store_id}; pass --force to overwrite")


if __name__ == "__main__":
    main()
