"""
Database utilities for the employee directory.
Handles PostgreSQL connections, pooling and the write-statement gateway.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Sequence

from psycopg2 import pool

from .config import Config

logger = logging.getLogger(__name__)


def log_sql_event(query_type: str, operation: str, **kwargs):
    """Log structured JSON event for SQL operations."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    log_data = {
        "ts": time.time(),
        "module": "employees",
        "query_type": query_type,
        "operation": operation,
        **kwargs
    }
    logger.debug("SQL_EVENT: %s", json.dumps(log_data, default=str))


def _as_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer; got {value!r}") from None


@dataclass
class DatabaseConfig:
    """Database configuration.

    Fields left as ``None`` fall back to the environment driven values in
    `Config`, so `DatabaseConfig()` picks up settings from `.env` or the
    environment. An explicitly empty password is kept as is.
    """
    database: str = None
    user: str = None
    password: str = None
    host: str = None
    port: int = None
    pool_min: int = None
    pool_max: int = None

    def __post_init__(self):
        self.database = Config.DB_NAME if self.database is None else self.database
        self.user = Config.DB_USER if self.user is None else self.user
        self.password = Config.DB_PASSWORD if self.password is None else self.password
        self.host = Config.DB_HOST if self.host is None else self.host
        self.port = _as_int("port", Config.DB_PORT if self.port is None else self.port)
        self.pool_min = _as_int("pool-min", Config.DB_POOL_MIN if self.pool_min is None else self.pool_min)
        self.pool_max = _as_int("pool-max", Config.DB_POOL_MAX if self.pool_max is None else self.pool_max)

        if self.pool_min < 0 or self.pool_max < 1:
            raise ValueError(f"Invalid pool bounds: min={self.pool_min}, max={self.pool_max}")
        if self.pool_min > self.pool_max:
            raise ValueError(f"pool-min ({self.pool_min}) exceeds pool-max ({self.pool_max})")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "DatabaseConfig":
        """Build a config from recognized option names.

        Accepts both ``pool-min`` and ``pool_min`` spellings. Unknown keys
        raise ``ValueError``.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = key.replace("-", "_")
            if name not in known:
                raise ValueError(f"Unknown database option: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    def get_connect_kwargs(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "dbname": self.database,
            "user": self.user,
            "password": self.password,
        }

    def describe(self) -> str:
        return f"{self.database}@{self.host}:{self.port}"


class DatabaseManager:
    """
    Manages pooled database connections for the employee directory.
    """
    
    def __init__(self, config: DatabaseConfig = None):
        self.config = config or DatabaseConfig()
        self._pool: Optional[pool.SimpleConnectionPool] = None

    def _get_pool(self) -> pool.SimpleConnectionPool:
        if self._pool is None:
            self._pool = pool.SimpleConnectionPool(
                self.config.pool_min,
                self.config.pool_max,
                **self.config.get_connect_kwargs()
            )
            logger.info(
                f"Connection pool created for {self.config.describe()} "
                f"(min={self.config.pool_min}, max={self.config.pool_max})"
            )
        return self._pool
        
    @contextmanager
    def get_connection(self):
        """Context manager for database connections."""
        conn = None
        try:
            conn = self._get_pool().getconn()
            yield conn
        except Exception as e:
            if conn is not None and not conn.closed:
                conn.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            if conn is not None:
                self._pool.putconn(conn, close=bool(conn.closed))

    def ping(self):
        """Open a connection and run a trivial statement; raises on failure."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()

    def close(self):
        """Close every pooled connection."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Connection pool closed")


class DatabaseService(ABC):
    """Narrow gateway for executing write statements."""

    @abstractmethod
    def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> None:
        ...


class PostgresDatabaseService(DatabaseService):
    """
    Executes write statements on an already open PostgreSQL connection.
    Each statement is committed on its own; errors propagate unchanged.
    """

    def __init__(self, connection):
        self._connection = connection

    def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> None:
        log_sql_event("WRITE", "execute", sql=query, params=params)
        with self._connection.cursor() as cur:
            cur.execute(query, params)
        self._connection.commit()
