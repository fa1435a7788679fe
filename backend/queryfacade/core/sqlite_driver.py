from __future__ import annotations

import asyncio
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional

import aiosqlite

from queryfacade.core.driver import QueryCallback
from queryfacade.core.exceptions import DatabaseError
from queryfacade.core.logging import get_logger
from queryfacade.models.results import WriteResult

logger = get_logger(__name__)


def _infinity(positive: bool) -> str:
    # SQLite reads an overflowing real literal as +/-Inf.
    return "9e999" if positive else "-9e999"


def escape_literal(value: Any) -> str:
    """Render *value* as an SQLite literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        if value.is_nan():
            return "NULL"
        if value.is_infinite():
            return _infinity(value > 0)
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NULL"
        if math.isinf(value):
            return _infinity(value > 0)
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"X'{bytes(value).hex()}'"
    if isinstance(value, datetime):
        return escape_literal(value.isoformat(sep=" "))
    if isinstance(value, (date, time)):
        return escape_literal(value.isoformat())
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(escape_literal(item) for item in value)
    text = str(value).replace("'", "''")
    return f"'{text}'"


class SQLiteConnection:
    """Callback-style connection handle over an ``aiosqlite`` connection.

    Statements are executed as tasks on the running loop; reads return a list
    of row dicts plus the column names, writes are committed and return a
    :class:`WriteResult`. Statements are serialized through ``_lock`` so a
    commit never interleaves with another statement on the shared connection.
    """

    def __init__(self, connection: aiosqlite.Connection) -> None:
        self._conn = connection
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    async def open(cls, db_path: str) -> SQLiteConnection:
        try:
            conn = await aiosqlite.connect(db_path)
            conn.row_factory = aiosqlite.Row
            logger.info("SQLite connection opened: %s", db_path)
            return cls(conn)
        except Exception as exc:
            raise DatabaseError(f"Failed to open database: {exc}", original=exc) from exc

    @classmethod
    async def open_memory(cls) -> SQLiteConnection:
        return await cls.open(":memory:")

    # ------------------------------------------------------------------
    # Driver protocol
    # ------------------------------------------------------------------

    def escape(self, value: Any) -> str:
        return escape_literal(value)

    def query(self, sql: str, callback: QueryCallback) -> None:
        task = asyncio.get_running_loop().create_task(self._execute(sql, callback))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _execute(self, sql: str, callback: QueryCallback) -> None:
        try:
            result, fields = await self._run(sql)
        except Exception as exc:
            callback(exc, None, None)
            return
        callback(None, result, fields)

    async def _run(self, sql: str) -> tuple[Any, Optional[list[str]]]:
        async with self._lock:
            cursor = await self._conn.execute(sql)
            if cursor.description is not None:
                rows = await cursor.fetchall()
                fields = [column[0] for column in cursor.description]
                if self._conn.in_transaction:
                    await self._conn.commit()
                return [dict(row) for row in rows], fields
            if self._conn.in_transaction:
                await self._conn.commit()

        count = max(cursor.rowcount, 0)
        return (
            WriteResult(affected_rows=count, changed_rows=count, insert_id=cursor.lastrowid),
            None,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        try:
            await self._conn.close()
            logger.info("SQLite connection closed")
        except Exception as exc:
            logger.warning("Error closing database: %s", exc)
