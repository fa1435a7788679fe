from __future__ import annotations

from typing import Any, Optional

from queryfacade.core.sql import FieldMap
from queryfacade.repositories.facade import QueryFacade


class BaseRepository:
    """Thin convenience wrapper binding :class:`QueryFacade` to one table.

    Subclasses set ``_table_name`` and add domain-specific helpers.
    """

    _table_name: str = ""

    def __init__(self, facade: QueryFacade) -> None:
        if not self._table_name:
            raise ValueError(f"{type(self).__name__} must set _table_name")
        self._facade = facade

    @property
    def table_name(self) -> str:
        return self._table_name

    # ------------------------------------------------------------------
    # Delegated helpers
    # ------------------------------------------------------------------

    async def find(self, conditions: Optional[FieldMap] = None, limit: int = 0) -> list[Any]:
        return await self._facade.find(self._table_name, conditions, limit)

    async def find_one(self, conditions: Optional[FieldMap] = None) -> Optional[Any]:
        return await self._facade.find_one(self._table_name, conditions)

    async def insert_one(self, data: Optional[FieldMap]) -> int:
        return await self._facade.insert_one(self._table_name, data)

    async def update_many(
        self, conditions: Optional[FieldMap], data: Optional[FieldMap], limit: int = 0
    ) -> int:
        return await self._facade.update_many(self._table_name, conditions, data, limit)

    async def update_one(self, conditions: Optional[FieldMap], data: Optional[FieldMap]) -> int:
        return await self._facade.update_one(self._table_name, conditions, data)

    async def delete_many(self, conditions: Optional[FieldMap], limit: int = 0) -> int:
        return await self._facade.delete_many(self._table_name, conditions, limit)

    async def delete_one(self, conditions: Optional[FieldMap]) -> int:
        return await self._facade.delete_one(self._table_name, conditions)
