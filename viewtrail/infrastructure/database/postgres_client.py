"""PostgreSQL connection pool used by the transactional entry store.

Each ``transaction()`` block borrows one pooled connection, commits on clean
exit and rolls back if anything inside raises.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Generator

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

from viewtrail.domain.errors import StoreUnavailable


@dataclass(frozen=True)
class PostgresConfig:
    host: str = "localhost"
    port: int = 5432
    database: str = "viewtrail"
    user: str = "viewtrail"
    password: str = "viewtrail_dev_password"
    max_connections: int = 10

    @classmethod
    def from_env(cls) -> PostgresConfig:
        return cls(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "viewtrail"),
            user=os.getenv("POSTGRES_USER", "viewtrail"),
            password=os.getenv("POSTGRES_PASSWORD", "viewtrail_dev_password"),
            max_connections=int(os.getenv("POSTGRES_MAX_CONNECTIONS", "10")),
        )


class PostgresClient:
    """PostgreSQL database client with connection pooling."""

    def __init__(self, config: PostgresConfig) -> None:
        """Initialize the connection pool.

        Raises:
            StoreUnavailable: If the database cannot be reached.
        """
        self.config = config
        try:
            # threaded pool: handlers run on FastAPI's worker threads
            self._pool: Any = pool.ThreadedConnectionPool(
                minconn=1,
                maxconn=config.max_connections,
                host=config.host,
                port=config.port,
                database=config.database,
                user=config.user,
                password=config.password,
            )
        except psycopg2.Error as exc:
            raise StoreUnavailable(f"Failed to initialize PostgreSQL connection pool: {exc}") from exc

    @contextmanager
    def transaction(self) -> Generator[Any, None, None]:
        """Yield a dict cursor inside one transaction.

        Raises:
            StoreUnavailable: If a connection cannot be obtained or the
                database drops it mid-transaction.
        """
        try:
            conn = self._pool.getconn()
        except psycopg2.Error as exc:
            raise StoreUnavailable(f"No PostgreSQL connection available: {exc}") from exc
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                yield cursor
            conn.commit()
        except psycopg2.OperationalError as exc:
            conn.rollback()
            raise StoreUnavailable(f"PostgreSQL operation failed: {exc}") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool:
            self._pool.closeall()
