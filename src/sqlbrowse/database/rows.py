"""
Row retrieval for sqlbrowse.

Paged reads of a single table and unrestricted raw SQL execution. Rows come
back as plain dicts holding driver-native values; normalization for the wire
happens later.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import asyncpg

from .introspection import quote_identifier
from ..exceptions import DatabaseError, InvalidInputError


logger = logging.getLogger(__name__)

ALL = "all"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
# LIMIT and OFFSET are bound as int8
MAX_BIGINT = 2**63 - 1

Row = Dict[str, Any]


def _parse_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"'{name}' must be a positive integer, got {value!r}")
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidInputError(f"'{name}' must be a positive integer, got {value!r}")
    if parsed < 1:
        raise InvalidInputError(f"'{name}' must be a positive integer, got {value!r}")
    if parsed > MAX_BIGINT:
        raise InvalidInputError(f"'{name}' is out of range, got {value!r}")
    return parsed


@dataclass(frozen=True)
class Pagination:
    """Requested page window. ``limit`` is a row count or the sentinel ``"all"``."""

    page: int = DEFAULT_PAGE
    limit: Union[int, str] = DEFAULT_LIMIT

    @classmethod
    def parse(
        cls,
        page: Optional[Any] = None,
        limit: Optional[Any] = None,
        default_limit: int = DEFAULT_LIMIT,
    ) -> "Pagination":
        """Build a window from request-supplied strings, rejecting malformed values."""
        parsed_page = DEFAULT_PAGE if page in (None, "") else _parse_positive_int("page", page)

        if limit in (None, ""):
            parsed_limit: Union[int, str] = default_limit
        elif isinstance(limit, str) and limit.strip() == ALL:
            parsed_limit = ALL
        else:
            parsed_limit = _parse_positive_int("limit", limit)

        if parsed_limit != ALL and (parsed_page - 1) * parsed_limit > MAX_BIGINT:
            raise InvalidInputError(
                f"'page' {parsed_page} with limit {parsed_limit} is out of range"
            )

        return cls(page=parsed_page, limit=parsed_limit)

    @property
    def is_unbounded(self) -> bool:
        return self.limit == ALL

    @property
    def offset(self) -> int:
        if self.is_unbounded:
            return 0
        return (self.page - 1) * self.limit

    def page_count(self, total: int) -> int:
        """Number of pages needed for ``total`` rows; never less than one."""
        if self.is_unbounded:
            return 1
        return max(1, math.ceil(total / self.limit))


@dataclass
class PageResult:
    """One page of a table plus the counts needed for pagination metadata."""

    rows: List[Row]
    total: int
    pagination: Pagination

    @property
    def pages(self) -> int:
        return self.pagination.page_count(self.total)

    def to_meta(self) -> Dict[str, Any]:
        return {
            "page": self.pagination.page,
            "limit": self.pagination.limit,
            "total": self.total,
            "pages": self.pages,
        }


@dataclass
class QueryResult:
    """Rows returned by a raw statement and its command status tag."""

    rows: List[Row] = field(default_factory=list)
    status: Optional[str] = None

    @property
    def row_count(self) -> int:
        return len(self.rows)


class RowFetcher:
    """Runs row-level queries on an acquired connection."""

    def __init__(self, schema: Optional[str] = None):
        self.schema = schema

    async def fetch_page(
        self,
        conn: asyncpg.Connection,
        table: str,
        pagination: Optional[Pagination] = None,
    ) -> PageResult:
        """
        Fetch one page of ``table``.

        The table name must already have been validated with
        SchemaIntrospector.table_exists. For a bounded page the total comes
        from a separate COUNT(*) that is not in the same snapshot as the page
        itself; under concurrent writes the two may disagree.
        """
        pagination = pagination or Pagination()
        qualified = quote_identifier(table, self.schema)

        try:
            if pagination.is_unbounded:
                records = await conn.fetch(f"SELECT * FROM {qualified}")
                total = len(records)
            else:
                total = await conn.fetchval(f"SELECT COUNT(*) FROM {qualified}")
                records = await conn.fetch(
                    f"SELECT * FROM {qualified} LIMIT $1 OFFSET $2",
                    pagination.limit,
                    pagination.offset,
                )
        except Exception as e:
            logger.error(f"Error fetching rows from {table}: {e}")
            raise DatabaseError(str(e), {"table": table}, cause=e) from e

        return PageResult(
            rows=[dict(record) for record in records],
            total=int(total or 0),
            pagination=pagination,
        )

    async def execute_raw(self, conn: asyncpg.Connection, sql: Any) -> QueryResult:
        """
        Execute arbitrary SQL text.

        No statement-type restriction is applied: reads, writes and DDL all run
        with the connected user's privileges. Driver errors are passed through
        verbatim as DatabaseError.
        """
        if not isinstance(sql, str) or not sql.strip():
            raise InvalidInputError("Query text is required")

        try:
            statement = await conn.prepare(sql)
            records = await statement.fetch()
            status = statement.get_statusmsg()
        except Exception as e:
            logger.error(f"Raw query failed: {e}")
            raise DatabaseError(str(e), cause=e) from e

        logger.debug(f"Raw query completed: {status}")
        return QueryResult(rows=[dict(record) for record in records], status=status)
