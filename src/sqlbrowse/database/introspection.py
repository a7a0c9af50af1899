"""
Database schema introspection for sqlbrowse.

Every call re-queries the live catalog; tables may be created or dropped
between requests.
"""

import logging
from typing import List, Optional

import asyncpg

from ..exceptions import DatabaseError


logger = logging.getLogger(__name__)


LIST_TABLES_QUERY = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = COALESCE($1::text, current_schema())
      AND table_type IN ('BASE TABLE', 'VIEW')
    ORDER BY table_name
"""

TABLE_EXISTS_QUERY = """
    SELECT EXISTS (
        SELECT 1 FROM information_schema.tables
        WHERE table_schema = COALESCE($1::text, current_schema())
          AND table_name = $2
    )
"""


def quote_identifier(name: str, schema: Optional[str] = None) -> str:
    """
    Quote a table identifier for interpolation into SQL text.

    This is the only place identifiers are spliced into statements. Callers
    must have checked the name with SchemaIntrospector.table_exists first.
    """
    quoted = '"' + name.replace('"', '""') + '"'
    if schema:
        return '"' + schema.replace('"', '""') + '".' + quoted
    return quoted


class SchemaIntrospector:
    """Lists and validates tables in one schema of the connected database."""

    def __init__(self, schema: Optional[str] = None):
        self.schema = schema

    async def list_tables(self, conn: asyncpg.Connection) -> List[str]:
        """Return the names of all tables and views, sorted."""
        try:
            rows = await conn.fetch(LIST_TABLES_QUERY, self.schema)
        except Exception as e:
            logger.error(f"Error listing tables: {e}")
            raise DatabaseError(str(e), cause=e) from e
        return [row["table_name"] for row in rows]

    async def table_exists(self, conn: asyncpg.Connection, name: str) -> bool:
        """Check if a table exists."""
        try:
            result = await conn.fetchval(TABLE_EXISTS_QUERY, self.schema, name)
        except Exception as e:
            logger.error(f"Error checking table existence for {name}: {e}")
            raise DatabaseError(str(e), cause=e) from e
        return bool(result)
