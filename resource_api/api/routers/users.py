# This file exposes the users collection under the versioned API path.
# It exists so the users resource gets the shared CRUD routes wired to its own service.
# The backing store (memory by default) is chosen in dependencies, not here.

from __future__ import annotations

from resource_api.api.dependencies import get_user_service
from resource_api.api.routers.resources import build_resource_router
from resource_api.stores.resources import USER_RESOURCE

router = build_resource_router(USER_RESOURCE, get_user_service)
