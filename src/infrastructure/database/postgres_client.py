"""PostgreSQL client for running the profile store against a local database.

Enabled with USE_LOCAL_DB=1; connection settings come from the POSTGRES_*
environment variables.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Generator

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor


class PostgresClient:
    """Pooled PostgreSQL access returning rows as dictionaries."""

    def __init__(self) -> None:
        self.enabled = os.getenv("USE_LOCAL_DB", "0") == "1"
        self._pool: Any = None

        if self.enabled:
            try:
                self._pool = pool.SimpleConnectionPool(
                    minconn=1,
                    maxconn=int(os.getenv("POSTGRES_POOL_SIZE", "10")),
                    host=os.getenv("POSTGRES_HOST", "localhost"),
                    port=int(os.getenv("POSTGRES_PORT", "5432")),
                    database=os.getenv("POSTGRES_DB", "jobboard"),
                    user=os.getenv("POSTGRES_USER", "jobboard"),
                    password=os.getenv("POSTGRES_PASSWORD", "jobboard_dev_password"),
                )
            except psycopg2.Error as exc:  # pragma: no cover
                raise RuntimeError(f"Failed to initialize PostgreSQL connection pool: {exc}") from exc

    @contextmanager
    def cursor(self) -> Generator[Any, None, None]:
        """Yield a dict cursor inside a transaction that commits on success.

        Raises:
            RuntimeError: If local database mode is not enabled.
        """
        if not self.enabled or self._pool is None:
            raise RuntimeError("Local PostgreSQL database is not enabled")

        conn = self._pool.getconn()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def fetch_one(self, query: str, params: tuple = ()) -> dict[str, Any] | None:
        with self.cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
            return dict(row) if row else None


_POSTGRES_CLIENT: PostgresClient | None = None


def get_postgres_client() -> PostgresClient | None:
    """Shared client when USE_LOCAL_DB=1, otherwise ``None``."""
    global _POSTGRES_CLIENT
    if os.getenv("USE_LOCAL_DB", "0") != "1":
        return None
    if _POSTGRES_CLIENT is None:
        _POSTGRES_CLIENT = PostgresClient()
    return _POSTGRES_CLIENT
