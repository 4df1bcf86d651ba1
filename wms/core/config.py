# wms/core/config.py
# - Reads env vars from ".env" if available (pydantic-settings).

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./app.db"

    # added to the CORS allow list when set
    FRONTEND_URL: str | None = None

    LOG_LEVEL: str = "INFO"

    # DEV ONLY: create tables at startup instead of running Alembic
    RUN_CREATE_ALL: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def sqlalchemy_database_url(self) -> str:
        # Render/Heroku style URLs still use the postgres:// scheme
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url


settings = Settings()
