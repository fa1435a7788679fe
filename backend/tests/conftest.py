"""Shared fixtures for the queryfacade test suite."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import pytest
import pytest_asyncio

from queryfacade.core.sqlite_driver import SQLiteConnection
from queryfacade.core.sql import SQLITE
from queryfacade.repositories.facade import QueryFacade


def mysql_escape(value: Any) -> str:
    """MySQL-flavoured literal rendering, close to what mysql drivers emit."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


class RecordingConnection:
    """In-memory fake satisfying the ``DriverConnection`` protocol.

    Records every statement and completes with the canned ``result`` or
    ``error``. ``threaded`` completes from a worker thread and ``completions``
    controls how many times the callback fires.
    """

    def __init__(
        self,
        result: Any = None,
        error: Optional[BaseException] = None,
        threaded: bool = False,
        completions: int = 1,
    ) -> None:
        self.result = result
        self.error = error
        self.threaded = threaded
        self.completions = completions
        self.statements: list[str] = []
        self.escaped: list[Any] = []

    def escape(self, value: Any) -> str:
        self.escaped.append(value)
        return mysql_escape(value)

    def query(self, sql: str, callback) -> None:
        self.statements.append(sql)

        def _complete() -> None:
            for _ in range(self.completions):
                if self.error is not None:
                    callback(self.error, None, None)
                else:
                    callback(None, self.result, [])

        if self.threaded:
            threading.Thread(target=_complete).start()
        else:
            _complete()

    @property
    def last_sql(self) -> str:
        return self.statements[-1]


@pytest.fixture()
def recorder() -> RecordingConnection:
    return RecordingConnection(result=[])


@pytest.fixture()
def facade(recorder: RecordingConnection) -> QueryFacade:
    return QueryFacade(recorder)


@pytest_asyncio.fixture()
async def sqlite_conn():
    conn = await SQLiteConnection.open_memory()
    try:
        yield conn
    finally:
        await conn.close()


@pytest_asyncio.fixture()
async def sqlite_facade(sqlite_conn: SQLiteConnection) -> QueryFacade:
    facade = QueryFacade(sqlite_conn, dialect=SQLITE)
    await facade.query(
        "CREATE TABLE users ("
        "    id INTEGER PRIMARY KEY,"
        "    name TEXT NOT NULL,"
        "    email TEXT UNIQUE,"
        "    active INTEGER DEFAULT 1"
        ")"
    )
    return facade


@pytest.fixture()
def fresh_root(monkeypatch):
    """Root logger with ``setup_logging`` re-armed; handlers restored afterwards."""
    from queryfacade.core import logging as qf_logging

    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    monkeypatch.setattr(qf_logging, "_setup_done", False)
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)
