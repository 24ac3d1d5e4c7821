# This file defines runtime settings for the API layer in one place.
# It exists so the store backend per resource, pool sizing, and table names can be configured without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# It also validates table names and version paths to prevent unsafe SQL identifier usage.

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from resource_api.common.db import safe_identifier

STORE_BACKENDS = frozenset({"memory", "sql"})


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Resource CRUD API"
    api_version_path: str = "/api/v1"
    schema_version: str = "1.0.0"
    host: str = "127.0.0.1"
    port: int = 8080
    environment: str = "local"
    log_level: str = "INFO"
    database_url: str = ""
    users_backend: str = "memory"
    todos_backend: str = "sql"
    db_pool_size: int = 16
    db_pool_timeout_seconds: float = 30.0
    create_tables: bool = True
    users_table_name: str = "users"
    todos_table_name: str = "todos"
    enable_request_logging: bool = False
    allowed_origins: list[str] = Field(default_factory=list)
    app_version: str = "0.1.0"

    @field_validator("api_version_path")
    @classmethod
    def validate_api_version_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("api_version_path must start with '/'.")
        parts = [part for part in value.split("/") if part]
        if len(parts) < 2 or parts[-1].startswith("v") is False:
            raise ValueError("api_version_path must look like '/api/v1'.")
        return value.rstrip("/")

    @field_validator("users_backend", "todos_backend")
    @classmethod
    def validate_backend(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in STORE_BACKENDS:
            raise ValueError(f"Store backend must be one of {sorted(STORE_BACKENDS)}, got {value!r}")
        return normalized

    @field_validator("users_table_name", "todos_table_name")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        return safe_identifier(value)

    @field_validator("db_pool_size", "db_pool_timeout_seconds", "port")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    @property
    def uses_sql_backend(self) -> bool:
        return "sql" in {self.users_backend, self.todos_backend}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Resource CRUD API"),
        "api_version_path": os.getenv("API_VERSION_PATH", "/api/v1"),
        "schema_version": os.getenv("API_SCHEMA_VERSION", "1.0.0"),
        "host": os.getenv("API_HOST", "127.0.0.1"),
        "port": _env_int("API_PORT", 8080),
        "environment": os.getenv("ENV", "local"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "database_url": os.getenv("DATABASE_URL", ""),
        "users_backend": os.getenv("USERS_BACKEND", "memory"),
        "todos_backend": os.getenv("TODOS_BACKEND", "sql"),
        "db_pool_size": _env_int("DB_POOL_SIZE", 16),
        "db_pool_timeout_seconds": _env_float("DB_POOL_TIMEOUT_SECONDS", 30.0),
        "create_tables": _env_bool("DB_CREATE_TABLES", True),
        "users_table_name": os.getenv("USERS_TABLE_NAME", "users"),
        "todos_table_name": os.getenv("TODOS_TABLE_NAME", "todos"),
        "enable_request_logging": _env_bool("API_ENABLE_REQUEST_LOGGING", False),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }

    config = ApiConfig.model_validate(config_values)
    if config.uses_sql_backend and not config.database_url.strip():
        raise RuntimeError("DATABASE_URL is required when a resource uses the sql backend.")
    return config


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
