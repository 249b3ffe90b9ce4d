from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rbo.infrastructure.cache import redis_client

_ENVIRONMENT = {
    "REDIS_URL": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    "SNAPSHOT_BACKEND": "redis",
    "OTEL_SERVICE_NAME": "rbo-backend-test",
    "OTEL_EXPORTER_OTLP_ENDPOINT": "",
}


@pytest.fixture(scope="session", autouse=True)
def integration_environment() -> Iterator[None]:
    previous = {key: os.environ.get(key) for key in _ENVIRONMENT}
    os.environ.update(_ENVIRONMENT)
    redis_client._build_client.cache_clear()
    try:
        if not redis_client.ping_client(redis_client.get_redis_client()):
            pytest.skip("redis is not reachable at REDIS_URL")
        yield
    finally:
        for key, value in previous.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        redis_client._build_client.cache_clear()


@pytest.fixture(autouse=True)
def clear_redis() -> Iterator[None]:
    redis = redis_client.get_redis_client()
    redis.flushdb()
    yield
    redis.flushdb()
