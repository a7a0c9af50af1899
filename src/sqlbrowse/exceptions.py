"""
Exception classes for sqlbrowse.

Errors that can reach an HTTP caller carry the status code and title used to
render the JSON:API error document.
"""

from typing import Any, Dict, Optional


class SqlBrowseError(Exception):
    """Base exception for all sqlbrowse errors."""

    status: int = 500
    title: str = "Internal Server Error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            result += f" [{details_str}]"
        if self.cause:
            result += f" (caused by: {self.cause})"
        return result


class ConfigurationError(SqlBrowseError):
    """Raised when there's an error in configuration."""

    pass


class InvalidInputError(SqlBrowseError):
    """Raised when caller-supplied input is malformed."""

    status = 400
    title = "Bad Request"


class UnsupportedSchemeError(InvalidInputError):
    """Raised when a connection URI names a protocol other than PostgreSQL."""

    def __init__(self, scheme: str) -> None:
        super().__init__(
            f"Unsupported database URI scheme '{scheme}'. "
            "URI must start with postgresql:// or postgres://",
            {"scheme": scheme},
        )
        self.scheme = scheme


class NotFoundError(SqlBrowseError):
    """Raised when a requested resource does not exist."""

    status = 404
    title = "Not Found"


class TableNotFoundError(NotFoundError):
    """Raised when a caller asks for a table that is not in the database."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Table '{table_name}' not found")
        self.table_name = table_name


class DatabaseError(SqlBrowseError):
    """Raised when a database operation fails on an acquired connection."""

    title = "Database Error"


class DatabaseConnectionError(DatabaseError):
    """Raised when a connection cannot be established or the pool is unusable."""

    pass


class StartupError(SqlBrowseError):
    """Raised when the service cannot start serving traffic."""

    pass
