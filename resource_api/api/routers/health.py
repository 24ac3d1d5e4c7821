# This file defines liveness, readiness, and version endpoints for API operations.
# It exists so orchestration and monitoring systems can verify service health quickly.
# The readiness check asks every resource store whether it can serve, which covers database connectivity.
# Version details here help clients track API and schema compatibility over time.

from __future__ import annotations

import subprocess
from datetime import UTC, datetime
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from resource_api.api.api_config import ApiConfig
from resource_api.api.dependencies import get_config, get_todo_service, get_user_service
from resource_api.api.schema_versions import build_version_fields
from resource_api.api.schemas.health_schemas import HealthResponse, ReadinessResponse, VersionResponse
from resource_api.api.services.resource_service import ResourceService

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
UserServiceDep = Annotated[ResourceService, Depends(get_user_service)]
TodoServiceDep = Annotated[ResourceService, Depends(get_todo_service)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@lru_cache(maxsize=1)
def _git_commit() -> str | None:
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
        value = completed.stdout.strip()
        return value or None
    except (OSError, subprocess.SubprocessError):
        return None


@router.get("/health", response_model=HealthResponse)
def health(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "timestamp": _utc_now(),
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(
    request: Request,
    config: ConfigDep,
    user_service: UserServiceDep,
    todo_service: TodoServiceDep,
) -> dict[str, object]:
    stores = {
        service.definition.name: {"backend": service.backend_name, "ready": service.is_ready()}
        for service in (user_service, todo_service)
    }
    sql_states = [state["ready"] for state in stores.values() if state["backend"] == "sql"]
    db_connected = all(sql_states) if sql_states else None
    if db_connected is None:
        database = "not_configured"
    else:
        database = "reachable" if db_connected else "unreachable"

    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "db_connected": db_connected,
        "stores": stores,
        "ready": all(state["ready"] for state in stores.values()),
        "database": database,
        "timestamp": _utc_now(),
    }


@router.get("/version", response_model=VersionResponse)
def version(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "api_version_path": config.api_version_path,
        "app_version": config.app_version,
        "git_commit": _git_commit(),
        "project": config.api_name,
        "version": config.app_version,
        "timestamp": _utc_now(),
    }
