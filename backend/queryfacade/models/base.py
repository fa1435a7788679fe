from __future__ import annotations

from pydantic import BaseModel as PydanticBaseModel


class BaseModel(PydanticBaseModel):
    """Project-wide base model; driver results are immutable once built."""

    model_config = {"frozen": True}
