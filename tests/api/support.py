# This file provides shared helpers for API endpoint tests.
# It exists so tests can override resource services without touching real databases.
# The helpers build consistent config objects, fresh services, and scoped TestClient contexts.
# Centralized test wiring keeps API tests small and focused on behavior.

from __future__ import annotations

from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient
from pydantic import BaseModel

from resource_api.api.api_config import ApiConfig
from resource_api.api.app import app
from resource_api.api.dependencies import get_config, get_todo_service, get_user_service
from resource_api.api.services.resource_service import ResourceService
from resource_api.stores.base import BackendFaultError
from resource_api.stores.memory_store import InMemoryStore
from resource_api.stores.resources import TODO_RESOURCE, USER_RESOURCE


def build_test_config() -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Resource API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        host="127.0.0.1",
        port=8080,
        environment="test",
        database_url="",
        users_backend="memory",
        todos_backend="memory",
        db_pool_size=4,
        db_pool_timeout_seconds=5,
        create_tables=False,
        enable_request_logging=False,
        allowed_origins=[],
        app_version="0.1.0",
    )


class UnavailableStore:
    """Store double whose backend is always down."""

    backend_name = "sql"

    def _fail(self) -> Any:
        raise BackendFaultError("connection refused", reason="backend_error")

    def create(self, payload: BaseModel) -> BaseModel:
        return self._fail()

    def list(self) -> list[BaseModel]:
        return self._fail()

    def get(self, record_id: Hashable) -> BaseModel | None:
        return self._fail()

    def update(self, record_id: Hashable, payload: BaseModel) -> BaseModel | None:
        return self._fail()

    def delete(self, record_id: Hashable) -> bool:
        return self._fail()

    def can_serve(self) -> bool:
        return False


def memory_user_service() -> ResourceService:
    return ResourceService(definition=USER_RESOURCE, store=InMemoryStore(USER_RESOURCE))


def memory_todo_service() -> ResourceService:
    return ResourceService(definition=TODO_RESOURCE, store=InMemoryStore(TODO_RESOURCE))


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    user_service: Any | None = None,
    todo_service: Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides.

    Each resource gets a fresh in-memory service unless one is supplied.
    """

    resolved_config = config or build_test_config()
    resolved_user_service = user_service or memory_user_service()
    resolved_todo_service = todo_service or memory_todo_service()

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_user_service] = lambda: resolved_user_service
    app.dependency_overrides[get_todo_service] = lambda: resolved_todo_service

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
