"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Taskwise Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://taskwise@localhost:5432/taskwise"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "taskwise"
    openai_api_key: str | None = None
    planner_model: str = "gpt-4o"
    # Empty string disables the secondary attempt.
    planner_fallback_model: str = "gpt-4o-mini"
    planner_temperature: float = 0.2
    default_time_zone: str = "UTC"
    session_store_provider: str = "memory"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
