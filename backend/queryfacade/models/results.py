from __future__ import annotations

from typing import Optional

from queryfacade.models.base import BaseModel


class WriteResult(BaseModel):
    """Outcome of an INSERT, UPDATE or DELETE as reported by a driver."""

    affected_rows: int = 0
    changed_rows: int = 0
    insert_id: Optional[int] = None
