# This file builds the CRUD router shared by every managed resource.
# It exists so users and todos expose the same verb-to-operation mapping without duplicated handlers.
# Handlers only move data between HTTP and the ResourceService; validation and mapping live in the service.
# Status codes follow the service outcome: 201 on create, 200 otherwise, errors via APIError handlers.

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import PlainTextResponse

from resource_api.api.schemas.common import ErrorResponse
from resource_api.api.services.resource_service import ResourceService
from resource_api.stores.resources import ResourceDefinition

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid payload."},
    404: {"model": ErrorResponse, "description": "Record not found."},
    503: {"model": ErrorResponse, "description": "Backend unavailable."},
}


def build_resource_router(
    definition: ResourceDefinition,
    service_dependency: Callable[[], ResourceService],
) -> APIRouter:
    """Create POST/GET/GET/PUT/DELETE routes for one resource."""

    router = APIRouter(prefix=f"/{definition.name}", tags=[definition.name])
    ServiceDep = Annotated[ResourceService, Depends(service_dependency)]
    record_model = definition.record_model

    @router.post(
        "",
        status_code=status.HTTP_201_CREATED,
        response_model=record_model,
        responses=_ERROR_RESPONSES,
        name=f"create_{definition.name}",
    )
    def create_record(service: ServiceDep, payload: Annotated[Any, Body()]) -> Any:
        return service.create(payload)

    @router.get("", response_model=list[record_model], name=f"list_{definition.name}")
    def list_records(service: ServiceDep) -> Any:
        return service.list()

    @router.get(
        "/{record_id}",
        response_model=record_model,
        responses=_ERROR_RESPONSES,
        name=f"get_{definition.name}",
    )
    def get_record(service: ServiceDep, record_id: str) -> Any:
        return service.get(record_id)

    @router.put(
        "/{record_id}",
        response_model=record_model,
        responses=_ERROR_RESPONSES,
        name=f"update_{definition.name}",
    )
    def update_record(service: ServiceDep, record_id: str, payload: Annotated[Any, Body()]) -> Any:
        return service.update(record_id, payload)

    @router.delete(
        "/{record_id}",
        response_class=PlainTextResponse,
        responses=_ERROR_RESPONSES,
        name=f"delete_{definition.name}",
    )
    def delete_record(service: ServiceDep, record_id: str) -> str:
        return service.delete(record_id)

    return router
