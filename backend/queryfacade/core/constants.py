from __future__ import annotations

# Dialects
DIALECT_MYSQL: str = "mysql"
DIALECT_SQLITE: str = "sqlite"
DEFAULT_DIALECT: str = DIALECT_MYSQL

# Configuration
ENV_PREFIX: str = "QUERYFACADE_"
SQL_LOGGER_NAME: str = "queryfacade.sql"

# Logging
DEFAULT_LOG_DIR: str = "logs"
DEFAULT_LOG_LEVEL: str = "INFO"
LOG_FILE_NAME: str = "queryfacade.log"
LOG_MAX_SIZE_BYTES: int = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT: int = 5
