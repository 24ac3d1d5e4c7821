# This file wraps the bounded connection pool the relational store draws handles from.
# It exists to keep engine and pool details out of the store and make connection scoping explicit.
# Every connection handed out is a context manager, so the handle returns to the pool on all exit paths.
# The helper also backs the readiness probe with connectivity and table-existence checks.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine

from resource_api.common.db import safe_identifier, test_connection


class DatabaseClient:
    """Minimal SQLAlchemy wrapper around a pooled engine."""

    def __init__(self, *, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def pool_size(self) -> int:
        return self._engine.pool.size()

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Borrow a pooled connection for read-only work."""

        with self._engine.connect() as connection:
            yield connection

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Borrow a pooled connection inside a transaction that commits on success."""

        with self._engine.begin() as connection:
            yield connection

    def can_connect(self) -> bool:
        return test_connection(self._engine)

    def table_exists(self, table_name: str) -> bool:
        safe_table = self.validate_identifier(table_name)
        with self._engine.connect() as connection:
            return inspect(connection).has_table(safe_table)

    def dispose(self) -> None:
        self._engine.dispose()

    @staticmethod
    def validate_identifier(identifier: str) -> str:
        return safe_identifier(identifier)
