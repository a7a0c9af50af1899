"""
sqlbrowse: browse a PostgreSQL database over a JSON:API-style HTTP gateway.

sqlbrowse lists tables, pages through rows and runs raw SQL, normalizing every
result into a stable resource-document wire format.
"""

__version__ = "0.1.0"
__author__ = "sqlbrowse Contributors"

from .config import SqlBrowseConfig
from .exceptions import (
    SqlBrowseError,
    ConfigurationError,
    InvalidInputError,
    NotFoundError,
    DatabaseError,
)

__all__ = [
    "__version__",
    "SqlBrowseConfig",
    "SqlBrowseError",
    "ConfigurationError",
    "InvalidInputError",
    "NotFoundError",
    "DatabaseError",
]
