from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from queryfacade.core.exceptions import DatabaseError
from queryfacade.core.logging import get_logger

logger = get_logger(__name__)

# callback(error, result, fields)
QueryCallback = Callable[[Optional[BaseException], Any, Any], None]


@runtime_checkable
class DriverConnection(Protocol):
    """Capability the host hands to the facade.

    ``query`` must invoke *callback* exactly once, with either an error or a
    result. It may do so from any thread.
    """

    def escape(self, value: Any) -> str: ...

    def query(self, sql: str, callback: QueryCallback) -> None: ...


async def run_query(connection: DriverConnection, sql: str) -> tuple[Any, Any]:
    """Send *sql* through *connection* and wait for its completion callback.

    Returns ``(result, fields)``. Driver errors, whether reported through the
    callback or raised by ``query`` itself, surface as :class:`DatabaseError`.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[tuple[Any, Any]] = loop.create_future()

    def _settle(error: Optional[BaseException], result: Any, fields: Any) -> None:
        if future.done():
            if not future.cancelled():
                logger.warning("Driver completed more than once for: %s", sql)
            return
        if error is not None:
            exc = DatabaseError(f"Query failed: {error}", original=error, sql=sql)
            if isinstance(error, BaseException):
                exc.__cause__ = error
            future.set_exception(exc)
        else:
            future.set_result((result, fields))

    def _callback(error: Optional[BaseException], result: Any = None, fields: Any = None) -> None:
        loop.call_soon_threadsafe(_settle, error, result, fields)

    try:
        connection.query(sql, _callback)
    except Exception as exc:
        raise DatabaseError(f"Query failed: {exc}", original=exc, sql=sql) from exc

    return await future
