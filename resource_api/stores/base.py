# This file defines the CRUD contract every resource store implements.
# It exists so the service layer can run unchanged over the in-memory map or the relational pool.
# Not-found outcomes are plain return values; only backend faults and corruption are raised.
# Keeping the taxonomy here lets routers and tests share one vocabulary for store failures.

from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol

from pydantic import BaseModel


class StoreError(Exception):
    """Base class for store failures that are not a missing record."""


class BackendFaultError(StoreError):
    """Pool exhaustion, statement failure, or lost connectivity."""

    def __init__(self, message: str, *, reason: str = "backend_error") -> None:
        self.reason = reason
        super().__init__(message)


class StoreCorruptedError(StoreError):
    """The store hit an internal invariant violation and must stop serving."""


class ResourceStore(Protocol):
    """Operations shared by all store implementations.

    `get` and `update` return None and `delete` returns False when the
    identifier does not exist. Identifiers are assigned by the store at
    create time and never change afterwards.
    """

    backend_name: str

    def create(self, payload: BaseModel) -> BaseModel: ...

    def list(self) -> list[BaseModel]: ...

    def get(self, record_id: Hashable) -> BaseModel | None: ...

    def update(self, record_id: Hashable, payload: BaseModel) -> BaseModel | None: ...

    def delete(self, record_id: Hashable) -> bool: ...

    def can_serve(self) -> bool: ...
