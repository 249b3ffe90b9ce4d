from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from sqlalchemy import Engine, create_engine, text


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _connect_args(url: str, timeout_seconds: int) -> dict[str, Any]:
    # sqlite's driver names the option differently and has no connect timeout.
    if url.startswith("sqlite"):
        return {"timeout": timeout_seconds, "check_same_thread": False}
    return {"connect_timeout": timeout_seconds}


@lru_cache(maxsize=8)
def _build_engine(url: str, connect_timeout: int) -> Engine:
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args=_connect_args(url, connect_timeout),
    )


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    return _build_engine(database_url(), max(1, int(timeout_seconds)))


def ping_engine(engine: Engine) -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
