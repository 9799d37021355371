"""
slotbook.config.postgres – PostgreSQL connection config (dataclass + validators).

Env vars: DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT, DB_POOL_RECYCLE,
DB_ECHO, DB_APPLICATION_NAME.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from slotbook.core.exceptions import ConfigurationError


def _validate_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise ConfigurationError("DATABASE_URL is required and must be non-empty")
    if not (
        url.startswith("postgresql://")
        or url.startswith("postgres://")
        or url.startswith("postgresql+asyncpg://")
    ):
        raise ConfigurationError(
            "DATABASE_URL must start with postgresql://, postgres:// or postgresql+asyncpg://",
            details={"url_prefix": url.split(":", 1)[0]},
        )
    return url


def _validate_positive_int(value: int, name: str) -> int:
    if not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"{name} must be an integer >= 1, got {value!r}")
    return value


@dataclass(frozen=True)
class PostgresConfig:
    """
    PostgreSQL connection and pool configuration.

    All fields are validated on construction. Use load_postgres_config()
    to build from environment variables.
    """

    url: str
    """DSN. Converted to postgresql+asyncpg in the engine."""

    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    """Seconds to wait for a connection from the pool."""

    pool_recycle: int = 1800
    echo: bool = False
    application_name: str = "slotbook"

    def __post_init__(self) -> None:
        _validate_url(self.url)
        _validate_positive_int(self.pool_size, "pool_size")
        if not isinstance(self.max_overflow, int) or self.max_overflow < 0:
            raise ConfigurationError(f"max_overflow must be a non-negative integer, got {self.max_overflow!r}")
        _validate_positive_int(self.pool_timeout, "pool_timeout")
        _validate_positive_int(self.pool_recycle, "pool_recycle")
        if not self.application_name.strip():
            raise ConfigurationError("application_name must be a non-empty string")

    @classmethod
    def from_env(cls, **overrides: object) -> PostgresConfig:
        """
        Build config from environment variables.

        Env:
            DATABASE_URL          – default postgresql://localhost/slotbook
            DB_POOL_SIZE          – default 5
            DB_MAX_OVERFLOW       – default 10
            DB_POOL_TIMEOUT       – default 30
            DB_POOL_RECYCLE       – default 1800
            DB_ECHO               – "1" / "true" / "yes" → True
            DB_APPLICATION_NAME   – default slotbook

        Overrides (keyword args) take precedence over env.
        """
        env_int = {
            "pool_size": ("DB_POOL_SIZE", 5),
            "max_overflow": ("DB_MAX_OVERFLOW", 10),
            "pool_timeout": ("DB_POOL_TIMEOUT", 30),
            "pool_recycle": ("DB_POOL_RECYCLE", 1800),
        }

        def _int(attr: str) -> int:
            v = overrides.get(attr)
            if v is not None:
                return int(v)  # type: ignore[arg-type]
            var, default = env_int[attr]
            try:
                return int(os.environ.get(var, default))
            except ValueError as exc:
                raise ConfigurationError(f"{var} must be an integer", cause=exc) from exc

        echo = overrides.get("echo")
        if echo is None:
            echo = os.environ.get("DB_ECHO", "").strip().lower() in ("1", "true", "yes")

        url = overrides.get("url") or os.environ.get("DATABASE_URL", "postgresql://localhost/slotbook")
        app_name = overrides.get("application_name") or os.environ.get("DB_APPLICATION_NAME", "slotbook")
        return cls(
            url=_validate_url(str(url)),
            pool_size=_int("pool_size"),
            max_overflow=_int("max_overflow"),
            pool_timeout=_int("pool_timeout"),
            pool_recycle=_int("pool_recycle"),
            echo=bool(echo),
            application_name=str(app_name),
        )


def load_postgres_config(**overrides: object) -> PostgresConfig:
    """Load and validate PostgreSQL config from environment (with optional overrides)."""
    return PostgresConfig.from_env(**overrides)
