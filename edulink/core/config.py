import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional, List, Dict, Any


class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "Edulink Identity Diagnostics"
    VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False)

    # Database Settings
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./edulink.db")
    DB_ECHO: bool = Field(default=False)
    DB_POOL_SIZE: int = Field(default=20)
    DB_MAX_OVERFLOW: int = Field(default=10)
    DB_POOL_TIMEOUT: int = Field(default=30)
    DB_POOL_RECYCLE: int = Field(default=1800)

    # CORS Settings
    ALLOWED_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ]
    )

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator('DATABASE_URL')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if "+" not in v.split("://", 1)[0]:
            raise ValueError(
                f"DATABASE_URL must name an async driver (e.g. sqlite+aiosqlite://), got: {v}"
            )
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )


# Initialize settings
settings = Settings()


# Helper Functions
def get_engine_options(config: Optional[Settings] = None) -> Dict[str, Any]:
    config = config or settings
    options: Dict[str, Any] = {
        "echo": config.DB_ECHO,
        "pool_pre_ping": True,
    }
    # SQLite pools ignore sizing and checkout timeouts
    if not config.is_sqlite:
        options.update({
            "pool_size": config.DB_POOL_SIZE,
            "max_overflow": config.DB_MAX_OVERFLOW,
            "pool_timeout": config.DB_POOL_TIMEOUT,
            "pool_recycle": config.DB_POOL_RECYCLE,
        })
    return options


def get_log_dir() -> Optional[str]:
    if not settings.LOG_DIR:
        return None
    folder = os.path.abspath(settings.LOG_DIR)
    os.makedirs(folder, exist_ok=True)
    return folder
