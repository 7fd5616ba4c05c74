from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

REQUIRED_DATABASE_SETTINGS = ("DB_HOST", "DB_PORT", "DB_NAME", "DB_USER", "DB_PASSWORD")


class Settings(BaseSettings):
    # PostgreSQL connection (shared by every logical database)
    DB_HOST: str = Field("", env="DB_HOST")
    DB_PORT: Optional[int] = Field(None, env="DB_PORT")
    DB_NAME: str = Field("", env="DB_NAME")
    DB_USER: str = Field("", env="DB_USER")
    DB_PASSWORD: str = Field("", env="DB_PASSWORD")
    # Schema substituted for the "ichigo." qualifier in query text
    DB_SCHEMA: str = Field("ichigo", env="DB_SCHEMA")

    # Connection pool, one per logical database
    DB_POOL_SIZE: int = Field(20, env="DB_POOL_SIZE")
    DB_POOL_MAX_OVERFLOW: int = Field(0, env="DB_POOL_MAX_OVERFLOW")
    DB_POOL_TIMEOUT: float = Field(10.0, env="DB_POOL_TIMEOUT")  # seconds waiting for a free connection
    DB_POOL_RECYCLE: int = Field(30, env="DB_POOL_RECYCLE")
    DB_CONNECT_TIMEOUT: int = Field(10, env="DB_CONNECT_TIMEOUT")

    # Logical databases the dashboard may target
    DASHBOARD_DATABASES: str = Field("ichigo,asterdex", env="DASHBOARD_DATABASES")
    DEFAULT_DATABASE: str = Field("ichigo", env="DEFAULT_DATABASE")

    # Snapshot query windows
    STATS_HISTORY_HOURS: int = Field(72, env="STATS_HISTORY_HOURS")
    STATS_LIST_LIMIT: int = Field(50, env="STATS_LIST_LIMIT")

    # Application
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")
    APP_PORT: int = Field(8000, env="APP_PORT")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_ignore_empty": True,
        "extra": "ignore",
    }

    def allowed_databases(self) -> List[str]:
        return [name.strip() for name in self.DASHBOARD_DATABASES.split(",") if name.strip()]

    def default_database(self) -> str:
        """DB_NAME when it is one of the dashboard databases, DEFAULT_DATABASE otherwise."""
        if self.DB_NAME and self.DB_NAME in self.allowed_databases():
            return self.DB_NAME
        return self.DEFAULT_DATABASE

    def missing_database_settings(self) -> List[str]:
        missing = []
        for name in REQUIRED_DATABASE_SETTINGS:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing


settings = Settings()
