from __future__ import annotations

from queryfacade.repositories.base import BaseRepository
from queryfacade.repositories.facade import QueryFacade

__all__ = [
    "BaseRepository",
    "QueryFacade",
]
