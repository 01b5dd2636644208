from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_MODEL_PATH = Path(__file__).parent / "policy_store" / "casbin_model.conf"


class Settings(BaseSettings):
    # Using a plain dict for model_config to avoid ConfigDict typing/overload issues
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Application Settings
    app_name: str = "SQLAlchemy Policy Store"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False, alias="DEBUG")

    # Database Settings
    database_url: str = Field(
        default="sqlite:///data/policy.db",
        description="SQLAlchemy database URL (driver + data source)",
        alias="DATABASE_URL",
    )
    db_echo: bool = Field(
        default=False, description="Enable SQLAlchemy echo logging", alias="DB_ECHO"
    )
    sqlite_busy_timeout_seconds: int = Field(
        default=30,
        description="SQLite busy timeout (seconds) when the database is locked",
        alias="SQLITE_BUSY_TIMEOUT_SECONDS",
    )
    sqlite_journal_mode: str = Field(
        default="WAL",
        description="SQLite journal mode (e.g. DELETE, WAL, MEMORY)",
        alias="SQLITE_JOURNAL_MODE",
    )
    sqlite_synchronous: str = Field(
        default="NORMAL",
        description="SQLite synchronous setting (e.g. FULL, NORMAL, OFF)",
        alias="SQLITE_SYNCHRONOUS",
    )

    # Casbin Settings
    casbin_model_path: str = Field(
        default=str(DEFAULT_MODEL_PATH),
        description="Path to the Casbin model configuration",
        alias="CASBIN_MODEL_PATH",
    )
    casbin_auto_save: bool = Field(
        default=True,
        description="Persist enforcer mutations through the adapter immediately",
        alias="CASBIN_AUTO_SAVE",
    )

    # Logging Settings
    log_level: str = Field(default="INFO", description="Log level", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(
        default=None, description="Optional log file path", alias="LOG_FILE"
    )

    @field_validator("sqlite_journal_mode", "sqlite_synchronous", mode="before")
    @classmethod
    def normalize_pragma(cls, value):
        """Upper-case SQLite pragma values; an empty string disables the pragma."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
