"""
Table browsing operations shared by the HTTP gateway and the CLI.

Each operation acquires one pooled connection, runs its queries, and releases
the connection on every exit path. Returned rows are already normalized for
JSON output.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .config import BrowseConfig
from .database.connection import ConnectionPool
from .database.introspection import SchemaIntrospector
from .database.rows import Pagination, PageResult, QueryResult, RowFetcher
from .exceptions import TableNotFoundError
from .serialization.normalizer import normalize_rows


logger = logging.getLogger(__name__)


@dataclass
class TablePage:
    """A normalized page of table rows."""

    table: str
    rows: List[Dict[str, Any]]
    result: PageResult

    @property
    def columns(self) -> List[str]:
        return list(self.rows[0].keys()) if self.rows else []


class TableBrowser:
    """Lists tables, pages through rows and runs raw SQL against one pool."""

    def __init__(self, pool: ConnectionPool, config: Optional[BrowseConfig] = None):
        self.pool = pool
        self.config = config or BrowseConfig()
        self.introspector = SchemaIntrospector(self.config.schema_name)
        self.fetcher = RowFetcher(self.config.schema_name)

    @property
    def database(self) -> Optional[str]:
        return self.pool.descriptor.database

    async def list_tables(self) -> List[str]:
        async with self.pool.acquire() as conn:
            return await self.introspector.list_tables(conn)

    async def read_table(
        self,
        table: str,
        page: Optional[Any] = None,
        limit: Optional[Any] = None,
    ) -> TablePage:
        """Validate ``table`` and fetch the requested page of it."""
        pagination = Pagination.parse(page, limit, self.config.default_limit)

        async with self.pool.acquire() as conn:
            if not await self.introspector.table_exists(conn, table):
                raise TableNotFoundError(table)
            result = await self.fetcher.fetch_page(conn, table, pagination)

        logger.debug(
            f"Fetched {len(result.rows)} of {result.total} rows from {table} "
            f"(page {pagination.page}, limit {pagination.limit})"
        )
        return TablePage(table=table, rows=normalize_rows(result.rows), result=result)

    async def run_query(self, sql: Any) -> QueryResult:
        """Execute raw SQL and return normalized rows."""
        async with self.pool.acquire() as conn:
            result = await self.fetcher.execute_raw(conn, sql)
        return QueryResult(rows=normalize_rows(result.rows), status=result.status)
