"""
Unit tests for database helpers and startup table bootstrap.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from resource_api.api import app as app_module
from resource_api.api.api_config import ApiConfig
from resource_api.api.db_access import DatabaseClient
from resource_api.common import db as db_module


def test_connection_check_reports_reachable_and_unreachable(sqlite_url: str, tmp_path: Path) -> None:
    reachable = db_module.create_pooled_engine(sqlite_url, pool_size=1, pool_timeout_seconds=1)
    unreachable = db_module.create_pooled_engine(
        f"sqlite:///{tmp_path / 'missing' / 'nested' / 'x.db'}",
        pool_size=1,
        pool_timeout_seconds=1,
    )
    try:
        assert db_module.test_connection(reachable) is True
        assert db_module.test_connection(unreachable) is False
        assert DatabaseClient(engine=unreachable).can_connect() is False
    finally:
        reachable.dispose()
        unreachable.dispose()


@pytest.mark.parametrize("name", ["todos; drop table users", "1todos", "to-dos", ""])
def test_unsafe_identifiers_rejected_everywhere(name: str) -> None:
    with pytest.raises(ValueError, match="Unsafe SQL identifier"):
        db_module.safe_identifier(name)
    with pytest.raises(ValueError, match="Unsafe SQL identifier"):
        DatabaseClient.validate_identifier(name)
    with pytest.raises(ValidationError, match="Unsafe SQL identifier"):
        ApiConfig(todos_table_name=name)


def test_bootstrap_creates_tables_when_database_reachable(
    sqlite_url: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = DatabaseClient(
        engine=db_module.create_pooled_engine(sqlite_url, pool_size=2, pool_timeout_seconds=1)
    )
    monkeypatch.setattr(app_module, "get_database_client", lambda: client)
    config = ApiConfig(database_url=sqlite_url, todos_backend="sql", todos_table_name="todo_items")

    try:
        app_module._bootstrap_database(config)
        assert client.table_exists("todo_items") is True
        assert client.table_exists("users") is True
    finally:
        client.dispose()


def test_bootstrap_skips_tables_when_database_unreachable(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    url = f"sqlite:///{tmp_path / 'missing' / 'x.db'}"
    client = DatabaseClient(engine=db_module.create_pooled_engine(url, pool_size=1, pool_timeout_seconds=1))
    ddl_calls: list[object] = []
    monkeypatch.setattr(app_module, "get_database_client", lambda: client)
    monkeypatch.setattr(app_module, "apply_resource_ddl", lambda *args, **kwargs: ddl_calls.append(args))

    try:
        app_module._bootstrap_database(ApiConfig(database_url=url, todos_backend="sql"))
    finally:
        client.dispose()

    assert ddl_calls == []
