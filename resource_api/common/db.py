"""
Database engine construction and table bootstrap.
It centralizes how the bounded connection pool is sized and how resource tables are created.
Keeping these helpers isolated lets the relational store focus on statements and row decoding.
"""

from __future__ import annotations

import re

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

USERS_DDL: dict[str, str] = {
    "postgresql": """
        CREATE TABLE IF NOT EXISTS {table} (
            id UUID PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL
        )
    """,
    "sqlite": """
        CREATE TABLE IF NOT EXISTS {table} (
            id CHAR(36) PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL
        )
    """,
}

TODOS_DDL: dict[str, str] = {
    "postgresql": """
        CREATE TABLE IF NOT EXISTS {table} (
            id BIGSERIAL PRIMARY KEY,
            title TEXT NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT FALSE
        )
    """,
    "sqlite": """
        CREATE TABLE IF NOT EXISTS {table} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT 0
        )
    """,
}


def safe_identifier(identifier: str) -> str:
    """Return `identifier` unchanged if it can be interpolated into DDL or DML."""

    if not _IDENTIFIER_RE.match(identifier):
        raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
    return identifier


def create_pooled_engine(
    database_url: str,
    *,
    pool_size: int = 16,
    pool_timeout_seconds: float = 30.0,
) -> Engine:
    """Build an engine whose pool never grows past `pool_size` live connections."""

    if not database_url.strip():
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout_seconds,
        pool_pre_ping=True,
        future=True,
    )


def apply_resource_ddl(engine: Engine, *, users_table: str, todos_table: str) -> None:
    """Create the resource tables when they do not exist yet."""

    dialect = engine.dialect.name
    if dialect not in USERS_DDL:
        raise RuntimeError(f"Unsupported database dialect for table bootstrap: {dialect!r}")

    statements = [
        USERS_DDL[dialect].format(table=safe_identifier(users_table)),
        TODOS_DDL[dialect].format(table=safe_identifier(todos_table)),
    ]
    with engine.begin() as connection:
        for statement in statements:
            connection.exec_driver_sql(statement)



def test_connection(engine: Engine) -> bool:
    """Return True if the database can be reached and queried."""

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
