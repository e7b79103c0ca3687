"""
Public product catalog backed by PostgreSQL.

A CatalogSession wraps one connection for one logical unit of work
(a full resolution pass or a single sampling call). The connection is
released on every exit path; driver errors leave the session as
DataAccessError.
"""

from contextlib import AbstractContextManager, contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

import psycopg2
from psycopg2 import sql
from psycopg2.extras import RealDictCursor

from core.logging import get_logger
from services.errors import DataAccessError

logger = get_logger(__name__)

# Returns a context manager that yields an open DB-API connection
ConnectionFactory = Callable[[], AbstractContextManager]


class CatalogSession:
    """Queries against the catalog over a single open connection."""

    def __init__(self, conn, table: str):
        self._conn = conn
        self._table = sql.Identifier(table)

    def _fetch(self, query: sql.Composed, params: tuple) -> List[Dict[str, Any]]:
        with self._conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(query, params)
            return [dict(row) for row in cur.fetchall()]

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Point lookup by product id. Returns at most one record."""
        rows = self._fetch(
            sql.SQL("SELECT * FROM {} WHERE product_id = %s LIMIT 1").format(self._table),
            (product_id,),
        )
        return rows[0] if rows else None

    def sample_titled(self, count: int) -> List[Dict[str, Any]]:
        """Up to `count` random records that carry a non-empty title."""
        return self._fetch(
            sql.SQL(
                "SELECT * FROM {} "
                "WHERE title IS NOT NULL AND title <> '' "
                "ORDER BY RANDOM() LIMIT %s"
            ).format(self._table),
            (count,),
        )


class PublicCatalog:
    """
    Entry point for public catalog access.

    Args:
        connect: factory returning a context manager around a fresh connection
        table: catalog table name
    """

    def __init__(self, connect: ConnectionFactory, table: str = "product_look_dim"):
        self._connect = connect
        self.table = table

    @contextmanager
    def session(self) -> Iterator[CatalogSession]:
        try:
            with self._connect() as conn:
                yield CatalogSession(conn, self.table)
        except psycopg2.Error as e:
            logger.error(
                "Public catalog error",
                table=self.table,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DataAccessError(f"Public catalog query failed: {e}") from e
