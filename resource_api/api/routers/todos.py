# This file exposes the todos collection under the versioned API path.
# It exists so the todos resource gets the shared CRUD routes wired to its own service.
# The backing store (sql by default) is chosen in dependencies, not here.

from __future__ import annotations

from resource_api.api.dependencies import get_todo_service
from resource_api.api.routers.resources import build_resource_router
from resource_api.stores.resources import TODO_RESOURCE

router = build_resource_router(TODO_RESOURCE, get_todo_service)
