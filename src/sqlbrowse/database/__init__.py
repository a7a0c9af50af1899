"""
Database integration package for sqlbrowse.

This package provides:
- Connection URI resolution
- Async PostgreSQL connection pooling
- Table listing and existence checks
- Paged row retrieval and raw query execution
"""

from .connection import ConnectionDescriptor, ConnectionPool
from .introspection import SchemaIntrospector, quote_identifier
from .rows import Pagination, PageResult, QueryResult, RowFetcher

__all__ = [
    "ConnectionDescriptor",
    "ConnectionPool",
    "SchemaIntrospector",
    "quote_identifier",
    "Pagination",
    "PageResult",
    "QueryResult",
    "RowFetcher",
]
