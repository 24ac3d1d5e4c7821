# This file describes the managed resources in terms the generic store and service code understands.
# It exists so one store implementation and one service class can handle both users and todos.
# Each definition names the record/payload models, the column order, and the identifier rules.
# Adding a resource means adding a definition here plus its schemas, not new CRUD code.

from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from resource_api.api.schemas.resource_schemas import Todo, TodoDTO, User, UserDTO

_POSITIVE_INT_RE = re.compile(r"[1-9][0-9]*")
# Largest value a signed 64-bit id column can hold.
MAX_INT_ID = 2**63 - 1


def _parse_uuid(raw: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(raw)
    except (TypeError, ValueError, AttributeError):
        return None


def _parse_positive_int(raw: str) -> int | None:
    if not isinstance(raw, str) or not _POSITIVE_INT_RE.fullmatch(raw):
        return None
    value = int(raw)
    return value if value <= MAX_INT_ID else None


@dataclass(frozen=True)
class ResourceDefinition:
    """Static description of one managed resource."""

    name: str
    label: str
    record_model: type[BaseModel]
    payload_model: type[BaseModel]
    fields: tuple[str, ...]
    parse_id: Callable[[str], Hashable | None]
    required_text_fields: tuple[str, ...] = ()
    id_factory: Callable[[], Hashable] | None = None

    @property
    def columns(self) -> tuple[str, ...]:
        return ("id", *self.fields)

    def build_record(self, record_id: Hashable, payload: BaseModel) -> BaseModel:
        return self.record_model.model_validate({"id": record_id, **payload.model_dump()})

    def record_from_row(self, row: tuple[Any, ...]) -> BaseModel:
        """Decode a row laid out as (id, *fields)."""

        return self.record_model.model_validate(dict(zip(self.columns, row, strict=True)))

    @staticmethod
    def bind_id(record_id: Hashable) -> Any:
        # DB-API drivers bind UUIDs as text; the column type does the cast.
        if isinstance(record_id, uuid.UUID):
            return str(record_id)
        return record_id


USER_RESOURCE = ResourceDefinition(
    name="users",
    label="User",
    record_model=User,
    payload_model=UserDTO,
    fields=("name", "email"),
    parse_id=_parse_uuid,
    required_text_fields=("name", "email"),
    id_factory=uuid.uuid4,
)

TODO_RESOURCE = ResourceDefinition(
    name="todos",
    label="Todo",
    record_model=Todo,
    payload_model=TodoDTO,
    fields=("title", "completed"),
    parse_id=_parse_positive_int,
    required_text_fields=("title",),
)

