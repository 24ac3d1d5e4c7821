# This file implements the relational store that persists records through a bounded connection pool.
# It exists so records survive restarts and can be shared by several service instances.
# Statements are built once per store and reused, with values bound by name on every call.
# Pool timeouts and SQL failures surface as BackendFaultError; missing rows are plain None/False results.

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.sql.elements import TextClause

from resource_api.api.db_access import DatabaseClient
from resource_api.stores.base import BackendFaultError
from resource_api.stores.resources import ResourceDefinition

LOGGER = logging.getLogger("resource_api.stores")


class PooledRelationalStore:
    """CRUD over one table, one pooled connection per operation."""

    backend_name = "sql"

    def __init__(
        self,
        definition: ResourceDefinition,
        *,
        db: DatabaseClient,
        table_name: str,
    ) -> None:
        self.definition = definition
        self.db = db
        self.table = db.validate_identifier(table_name)
        self._statements = self._prepare_statements()

    def _prepare_statements(self) -> dict[str, TextClause]:
        fields = self.definition.fields
        returning = ", ".join(self.definition.columns)
        insert_columns = self.definition.columns if self.definition.id_factory else fields
        insert_values = ", ".join(f":{column}" for column in insert_columns)
        assignments = ", ".join(f"{field} = :{field}" for field in fields)

        return {
            "insert": text(
                f"INSERT INTO {self.table} ({', '.join(insert_columns)}) "
                f"VALUES ({insert_values}) RETURNING {returning}"
            ),
            "select_all": text(f"SELECT {returning} FROM {self.table} ORDER BY id"),
            "select_one": text(f"SELECT {returning} FROM {self.table} WHERE id = :id"),
            "update": text(
                f"UPDATE {self.table} SET {assignments} WHERE id = :id RETURNING {returning}"
            ),
            "delete": text(f"DELETE FROM {self.table} WHERE id = :id"),
        }

    @contextmanager
    def _backend_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except PoolTimeoutError as exc:
            LOGGER.error(
                "Connection pool exhausted during %s on %s (pool_size=%s).",
                operation,
                self.table,
                self.db.pool_size,
            )
            raise BackendFaultError(
                f"Timed out waiting for a database connection during {operation}.",
                reason="timeout",
            ) from exc
        except SQLAlchemyError as exc:
            LOGGER.exception("Database failure during %s on %s.", operation, self.table)
            raise BackendFaultError(f"Database failure during {operation}.") from exc

    def _field_params(self, payload: BaseModel) -> dict[str, Any]:
        values = payload.model_dump()
        return {field: values[field] for field in self.definition.fields}

    def can_serve(self) -> bool:
        return self.db.can_connect()

    def create(self, payload: BaseModel) -> BaseModel:
        params = self._field_params(payload)
        if self.definition.id_factory is not None:
            params["id"] = self.definition.bind_id(self.definition.id_factory())

        with self._backend_call("create"), self.db.begin() as connection:
            row = connection.execute(self._statements["insert"], params).one()
        return self.definition.record_from_row(tuple(row))

    def list(self) -> list[BaseModel]:
        with self._backend_call("list"), self.db.connect() as connection:
            rows = connection.execute(self._statements["select_all"]).all()
        return [self.definition.record_from_row(tuple(row)) for row in rows]

    def get(self, record_id: Hashable) -> BaseModel | None:
        params = {"id": self.definition.bind_id(record_id)}
        with self._backend_call("get"), self.db.connect() as connection:
            row = connection.execute(self._statements["select_one"], params).first()
        if row is None:
            return None
        return self.definition.record_from_row(tuple(row))

    def update(self, record_id: Hashable, payload: BaseModel) -> BaseModel | None:
        # One round trip: the row is returned by the same statement that changed it.
        params = {**self._field_params(payload), "id": self.definition.bind_id(record_id)}
        with self._backend_call("update"), self.db.begin() as connection:
            row = connection.execute(self._statements["update"], params).first()
        if row is None:
            return None
        return self.definition.record_from_row(tuple(row))

    def delete(self, record_id: Hashable) -> bool:
        params = {"id": self.definition.bind_id(record_id)}
        with self._backend_call("delete"), self.db.begin() as connection:
            result = connection.execute(self._statements["delete"], params)
            affected = result.rowcount
        return affected > 0
