"""
Application Configuration

Centralized settings management using Pydantic BaseSettings.
All values are loaded from environment variables or .env file.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable binding.

    Required env vars (no defaults):
        POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_HOST, POSTGRES_DB

    Optional env vars:
        POSTGRES_PORT (5432), API_PREFIX (/api/v1), TEXT_SEARCH_CONFIG (english),
        CORS_ORIGINS (["*"]), DB_CONNECT_RETRIES (10), DB_CONNECT_DELAY (1),
        RATE_LIMIT_ENABLED (true), RATE_LIMIT_MAX (100), RATE_LIMIT_WINDOW (60),
        RATE_LIMIT_ALLOW_LIST (["127.0.0.1"]), LOG_LEVEL (INFO)
    """

    PROJECT_NAME: str = "mod-notes API"
    VERSION: str = "1.0.0"

    # Database
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_HOST: str
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str

    DB_CONNECT_RETRIES: int = 10
    DB_CONNECT_DELAY: int = 1

    # HTTP
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: list[str] = ["*"]

    # Full-text search. The ix_notes_fts GIN index is built with 'english'; any
    # other value still works but cannot use that index (sequential scan).
    TEXT_SEARCH_CONFIG: str = "english"

    # Rate limiting (per client address, in-process sliding window)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX: int = 100
    RATE_LIMIT_WINDOW: int = 60
    RATE_LIMIT_ALLOW_LIST: list[str] = ["127.0.0.1"]

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",  # Silently ignore unknown env vars
    )

    @field_validator("TEXT_SEARCH_CONFIG")
    @classmethod
    def _check_search_config(cls, value: str) -> str:
        # Interpolated into SQL as a regconfig literal
        if not value.isidentifier():
            raise ValueError(f"Invalid text search configuration: {value!r}")
        return value

    @property
    def DATABASE_URL(self) -> str:
        """Async PostgreSQL connection string using asyncpg driver."""
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()  # type: ignore[call-arg]
