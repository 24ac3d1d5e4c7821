# This file provides dependency factories for FastAPI routes and middleware.
# It exists so each resource's store is created once and shared through dependency injection.
# The backend for each resource (memory or sql) is picked from configuration at first use.
# Tests override these factories to run the same routes against fresh stores.

from __future__ import annotations

from functools import lru_cache

from resource_api.api.api_config import ApiConfig, get_api_config
from resource_api.api.db_access import DatabaseClient
from resource_api.api.services.resource_service import ResourceService
from resource_api.common.db import create_pooled_engine
from resource_api.stores.base import ResourceStore
from resource_api.stores.memory_store import InMemoryStore
from resource_api.stores.resources import TODO_RESOURCE, USER_RESOURCE, ResourceDefinition
from resource_api.stores.sql_store import PooledRelationalStore


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    engine = create_pooled_engine(
        config.database_url,
        pool_size=config.db_pool_size,
        pool_timeout_seconds=config.db_pool_timeout_seconds,
    )
    return DatabaseClient(engine=engine)


def build_store(
    definition: ResourceDefinition,
    *,
    backend: str,
    table_name: str,
    db: DatabaseClient | None = None,
) -> ResourceStore:
    """Instantiate the configured store for one resource."""

    if backend == "memory":
        return InMemoryStore(definition)
    if backend == "sql":
        return PooledRelationalStore(definition, db=db or get_database_client(), table_name=table_name)
    raise ValueError(f"Unknown store backend: {backend!r}")


@lru_cache(maxsize=1)
def get_user_service() -> ResourceService:
    config = get_api_config()
    store = build_store(
        USER_RESOURCE,
        backend=config.users_backend,
        table_name=config.users_table_name,
    )
    return ResourceService(definition=USER_RESOURCE, store=store)


@lru_cache(maxsize=1)
def get_todo_service() -> ResourceService:
    config = get_api_config()
    store = build_store(
        TODO_RESOURCE,
        backend=config.todos_backend,
        table_name=config.todos_table_name,
    )
    return ResourceService(definition=TODO_RESOURCE, store=store)


def get_config() -> ApiConfig:
    return get_api_config()
