import os
import uuid

import pytest

from resource_api.api.db_access import DatabaseClient
from resource_api.api.schemas.resource_schemas import TodoDTO, UserDTO
from resource_api.common.db import apply_resource_ddl, create_pooled_engine
from resource_api.stores.resources import TODO_RESOURCE, USER_RESOURCE
from resource_api.stores.sql_store import PooledRelationalStore

if os.getenv("RUN_DB_INTEGRATION") != "1":
    pytest.skip("Set RUN_DB_INTEGRATION=1 to run PostgreSQL integration tests", allow_module_level=True)


@pytest.fixture()
def pg_client():
    engine = create_pooled_engine(os.environ["DATABASE_URL"], pool_size=4, pool_timeout_seconds=5)
    suffix = uuid.uuid4().hex[:8]
    users_table, todos_table = f"users_it_{suffix}", f"todos_it_{suffix}"
    apply_resource_ddl(engine, users_table=users_table, todos_table=todos_table)
    client = DatabaseClient(engine=engine)
    yield client, users_table, todos_table
    with engine.begin() as connection:
        connection.exec_driver_sql(f"DROP TABLE IF EXISTS {users_table}")
        connection.exec_driver_sql(f"DROP TABLE IF EXISTS {todos_table}")
    client.dispose()


@pytest.mark.integration
def test_todo_roundtrip_on_postgres(pg_client) -> None:
    client, _, todos_table = pg_client
    if not client.can_connect():
        pytest.skip("Postgres unavailable in local test environment")
    store = PooledRelationalStore(TODO_RESOURCE, db=client, table_name=todos_table)

    created = store.create(TodoDTO(title="buy milk", completed=False))
    assert created.id >= 1
    assert store.update(created.id, TodoDTO(title="buy milk", completed=True)).completed is True
    assert store.delete(created.id) is True
    assert store.delete(created.id) is False


@pytest.mark.integration
def test_user_roundtrip_on_postgres(pg_client) -> None:
    client, users_table, _ = pg_client
    if not client.can_connect():
        pytest.skip("Postgres unavailable in local test environment")
    store = PooledRelationalStore(USER_RESOURCE, db=client, table_name=users_table)

    created = store.create(UserDTO(name="Ada", email="ada@x.io"))
    assert store.get(created.id) == created
    assert client.table_exists(users_table) is True
