from __future__ import annotations

from typing import Any, Mapping, Optional

from queryfacade.core import sql as statements
from queryfacade.core.config import FacadeSettings
from queryfacade.core.constants import SQL_LOGGER_NAME
from queryfacade.core.driver import DriverConnection, run_query
from queryfacade.core.exceptions import InvalidArgument
from queryfacade.core.logging import configure_logging, get_logger
from queryfacade.core.sql import MYSQL, Dialect, FieldMap

sql_logger = get_logger(SQL_LOGGER_NAME)


def _count(result: Any, *keys: str) -> int:
    """First truthy row count found on *result* under *keys*, else 0."""
    if result is None:
        return 0
    for key in keys:
        if isinstance(result, Mapping):
            value = result.get(key)
        else:
            value = getattr(result, key, None)
        if value:
            return int(value)
    return 0


class QueryFacade:
    """CRUD helpers that assemble simple SQL and run it on a borrowed connection.

    The connection is never opened, pooled or closed here. Condition and data
    maps may be mappings or ordered ``(column, value)`` sequences; values are
    always rendered with ``connection.escape``.
    """

    def __init__(
        self,
        connection: DriverConnection,
        debug: bool = False,
        dialect: Dialect = MYSQL,
    ) -> None:
        self._conn = connection
        self._debug = debug
        self._dialect = dialect

    @classmethod
    def from_settings(cls, connection: DriverConnection, settings: FacadeSettings) -> QueryFacade:
        """Build a facade from *settings*; with ``debug`` on, logging is configured too."""
        if settings.debug:
            configure_logging(settings)
        return cls(
            connection,
            debug=settings.debug,
            dialect=statements.get_dialect(settings.dialect),
        )

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _execute(self, operation: str, sql: str) -> Any:
        if self._debug:
            sql_logger.info("%s: %s", operation, sql, extra={"operation": operation, "sql": sql})
        result, _fields = await run_query(self._conn, sql)
        return result

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find(
        self, table: str, conditions: Optional[FieldMap] = None, limit: int = 0
    ) -> list[Any]:
        """Rows of *table* matching every condition; all rows when *limit* is 0."""
        sql = statements.build_select(
            table,
            statements.normalize_pairs(conditions),
            self._conn.escape,
            statements.coerce_count(limit, "limit"),
        )
        return await self._execute("find", sql)

    async def find_one(self, table: str, conditions: Optional[FieldMap] = None) -> Optional[Any]:
        """First matching row, or ``None`` when nothing matches."""
        rows = await self.find(table, conditions, 1)
        if isinstance(rows, (list, tuple)) and rows:
            return rows[0]
        return None

    async def query(
        self,
        sql_template: str,
        params: Optional[FieldMap] = None,
        offset: int = 0,
        limit: int = 0,
    ) -> Any:
        """Run an arbitrary statement with ``$name`` tokens bound from *params*.

        Example: ``query("select * from users where user_id = $user_id", {"user_id": 1234})``.
        """
        limit = statements.coerce_count(limit, "limit")
        offset = statements.coerce_count(offset, "offset")
        sql = statements.substitute_params(sql_template, params, self._conn.escape)
        tail = statements.limit_clause(limit, offset)
        if tail:
            sql = f"{sql} {tail}"
        return await self._execute("query", sql)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert_one(self, table: str, data: Optional[FieldMap]) -> int:
        """Insert one row, returning 1, or 0 when a duplicate key was ignored."""
        pairs = statements.normalize_pairs(data)
        if not pairs:
            raise InvalidArgument("invalid insert data")
        sql = statements.build_insert(table, pairs, self._conn.escape, self._dialect)
        result = await self._execute("insert_one", sql)
        return _count(result, "affected_rows", "affectedRows")

    async def update_many(
        self,
        table: str,
        conditions: Optional[FieldMap],
        data: Optional[FieldMap],
        limit: int = 0,
    ) -> int:
        """Update rows matching *conditions*, at most *limit* of them when positive."""
        where = statements.normalize_pairs(conditions)
        if not where:
            raise InvalidArgument("invalid filters data")
        pairs = statements.normalize_pairs(data)
        if not pairs:
            raise InvalidArgument("invalid update data")
        sql = statements.build_update(
            table,
            where,
            pairs,
            self._conn.escape,
            statements.coerce_count(limit, "limit"),
            self._dialect,
        )
        result = await self._execute("update", sql)
        return _count(result, "changed_rows", "changedRows")

    async def update_one(
        self, table: str, conditions: Optional[FieldMap], data: Optional[FieldMap]
    ) -> int:
        return await self.update_many(table, conditions, data, 1)

    async def delete_many(
        self, table: str, conditions: Optional[FieldMap], limit: int = 0
    ) -> int:
        """Delete rows matching *conditions*, at most *limit* of them when positive."""
        where = statements.normalize_pairs(conditions)
        if not where:
            raise InvalidArgument("invalid filters data")
        sql = statements.build_delete(
            table,
            where,
            self._conn.escape,
            statements.coerce_count(limit, "limit"),
            self._dialect,
        )
        result = await self._execute("delete", sql)
        return _count(result, "affected_rows", "affectedRows")

    async def delete_one(self, table: str, conditions: Optional[FieldMap]) -> int:
        return await self.delete_many(table, conditions, 1)
