# This file implements the CRUD service that sits between resource routers and the configured store.
# It exists so routers stay transport-focused while validation and outcome mapping live in one layer.
# Payloads are validated before any store call, and store outcomes become APIError kinds for the boundary.
# The service holds nothing but its store reference, so a fresh store gives a fresh service in tests.

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Any

from pydantic import BaseModel, ValidationError

from resource_api.api.error_handlers import APIError
from resource_api.stores.base import BackendFaultError, ResourceStore
from resource_api.stores.resources import ResourceDefinition

LOGGER = logging.getLogger("resource_api.service")


class ResourceService:
    """Create, read, list, update, and delete for one resource."""

    def __init__(self, *, definition: ResourceDefinition, store: ResourceStore) -> None:
        self.definition = definition
        self.store = store

    @property
    def backend_name(self) -> str:
        return self.store.backend_name

    def create(self, raw_payload: Any) -> BaseModel:
        payload = self.validate_payload(raw_payload)
        record = self._call_store("create", self.store.create, payload)
        LOGGER.info("created %s id=%s", self.definition.name, record.id)
        return record

    def list(self) -> list[BaseModel]:
        return self._call_store("list", self.store.list)

    def get(self, raw_id: str) -> BaseModel:
        record_id = self._resolve_id(raw_id)
        record = self._call_store("get", self.store.get, record_id)
        if record is None:
            raise self._not_found()
        return record

    def update(self, raw_id: str, raw_payload: Any) -> BaseModel:
        payload = self.validate_payload(raw_payload)
        record_id = self._resolve_id(raw_id)
        record = self._call_store("update", self.store.update, record_id, payload)
        if record is None:
            raise self._not_found()
        LOGGER.info("updated %s id=%s", self.definition.name, record_id)
        return record

    def delete(self, raw_id: str) -> str:
        record_id = self._resolve_id(raw_id)
        if not self._call_store("delete", self.store.delete, record_id):
            raise self._not_found()
        LOGGER.info("deleted %s id=%s", self.definition.name, record_id)
        return f"{self.definition.label} deleted"

    def is_ready(self) -> bool:
        return self.store.can_serve()

    def validate_payload(self, raw_payload: Any) -> BaseModel:
        if not isinstance(raw_payload, dict):
            raise APIError(
                status_code=400,
                error_code="INVALID_PAYLOAD",
                message=f"{self.definition.label} payload must be a JSON object.",
            )

        try:
            payload = self.definition.payload_model.model_validate(raw_payload)
        except ValidationError as exc:
            raise APIError(
                status_code=400,
                error_code="INVALID_PAYLOAD",
                message=f"Invalid {self.definition.label} payload.",
                details=[
                    {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                    for error in exc.errors()
                ],
            ) from exc

        blank_fields = [
            field
            for field in self.definition.required_text_fields
            if not str(getattr(payload, field)).strip()
        ]
        if blank_fields:
            raise APIError(
                status_code=400,
                error_code="INVALID_PAYLOAD",
                message=f"Fields must not be empty: {', '.join(blank_fields)}.",
                details={"empty_fields": blank_fields},
            )
        return payload

    def _resolve_id(self, raw_id: str) -> Hashable:
        # An identifier that cannot be parsed was never created.
        record_id = self.definition.parse_id(raw_id)
        if record_id is None:
            raise self._not_found()
        return record_id

    def _not_found(self) -> APIError:
        return APIError(
            status_code=404,
            error_code=f"{self.definition.label.upper()}_NOT_FOUND",
            message=f"{self.definition.label} not found",
        )

    def _call_store(self, operation: str, method: Any, *args: Any) -> Any:
        try:
            return method(*args)
        except BackendFaultError as exc:
            LOGGER.warning(
                "%s %s failed on %s backend: %s",
                self.definition.name,
                operation,
                self.backend_name,
                exc.reason,
            )
            raise APIError(
                status_code=503,
                error_code="BACKEND_UNAVAILABLE",
                message=f"{self.definition.label} storage is temporarily unavailable.",
                details={"reason": exc.reason},
            ) from exc
