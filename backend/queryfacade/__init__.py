"""Async CRUD query-building facade over a callback-style database driver."""

from __future__ import annotations

from queryfacade.core.driver import DriverConnection
from queryfacade.core.exceptions import (
    ConfigError,
    DatabaseError,
    InvalidArgument,
    QueryFacadeError,
)
from queryfacade.core.sql import MYSQL, SQLITE, Dialect
from queryfacade.repositories import BaseRepository, QueryFacade

__version__ = "0.1.0"

__all__ = [
    "BaseRepository",
    "ConfigError",
    "DatabaseError",
    "Dialect",
    "DriverConnection",
    "InvalidArgument",
    "MYSQL",
    "QueryFacade",
    "QueryFacadeError",
    "SQLITE",
]
