# This file defines the record and payload schemas for the managed resources.
# It exists so stores, services, and routers agree on one JSON shape per resource.
# Payload models carry every mutable field and never an identifier.
# Record models add the store-assigned id in front of the same fields.

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserDTO(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: str
    email: str


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    email: str


class TodoDTO(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    title: str
    completed: bool


class Todo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    title: str
    completed: bool
