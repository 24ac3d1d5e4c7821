"""
Shared test configuration.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_DEFAULTS: dict[str, str] = {
    "ENV": "test",
    "LOG_LEVEL": "INFO",
    "USERS_BACKEND": "memory",
    "TODOS_BACKEND": "memory",
    "DATABASE_URL": "",
    "API_HOST": "127.0.0.1",
    "API_PORT": "8080",
}

# The application module builds its app at import time, so the environment must be set first.
for _key, _value in TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _value)


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    for key, value in TEST_ENV_DEFAULTS.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)


@pytest.fixture()
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'resources.db'}"


@pytest.fixture()
def db_client(sqlite_url: str) -> Iterator[object]:
    from resource_api.api.db_access import DatabaseClient
    from resource_api.common.db import apply_resource_ddl, create_pooled_engine

    engine = create_pooled_engine(sqlite_url, pool_size=4, pool_timeout_seconds=5)
    apply_resource_ddl(engine, users_table="users", todos_table="todos")
    client = DatabaseClient(engine=engine)
    try:
        yield client
    finally:
        client.dispose()
