from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

from queryfacade.core.constants import (
    DEFAULT_DIALECT,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_LEVEL,
    DIALECT_MYSQL,
    DIALECT_SQLITE,
    ENV_PREFIX,
)
from queryfacade.core.exceptions import ConfigError


class FacadeSettings(BaseSettings):
    """Settings read from ``QUERYFACADE_*`` environment variables."""

    debug: bool = False
    dialect: str = DEFAULT_DIALECT
    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: Optional[str] = DEFAULT_LOG_DIR

    model_config = {"env_prefix": ENV_PREFIX, "extra": "ignore"}

    @field_validator("dialect")
    @classmethod
    def _check_dialect(cls, value: str) -> str:
        value = value.lower()
        if value not in (DIALECT_MYSQL, DIALECT_SQLITE):
            raise ValueError(f"unsupported dialect: {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level: {value}")
        return value

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def load_settings(env_path: Optional[Path | str] = ".env", **overrides) -> FacadeSettings:
    """Load ``.env`` (when present) into the environment and build settings.

    Keyword *overrides* win over the environment.
    """
    if env_path is not None and Path(env_path).exists():
        load_dotenv(dotenv_path=env_path, override=True)
    try:
        return FacadeSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Settings validation failed: {exc}") from exc
