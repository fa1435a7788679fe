from __future__ import annotations

from typing import Optional


class QueryFacadeError(Exception):
    """Base exception for the queryfacade project."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(self.message)


class ConfigError(QueryFacadeError):
    """Raised when settings loading or validation fails."""


class InvalidArgument(QueryFacadeError):
    """Raised when a required condition or data map is missing."""


class DatabaseError(QueryFacadeError):
    """Raised when the driver reports a failed statement.

    ``original`` is the driver's own error, ``sql`` the statement that failed.
    """

    def __init__(
        self,
        message: str = "",
        original: Optional[BaseException] = None,
        sql: Optional[str] = None,
    ) -> None:
        self.original = original
        self.sql = sql
        super().__init__(message)
