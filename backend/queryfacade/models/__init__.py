from __future__ import annotations

from queryfacade.models.base import BaseModel
from queryfacade.models.results import WriteResult

__all__ = ["BaseModel", "WriteResult"]
