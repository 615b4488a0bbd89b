from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Career Match"
    app_env: str = "dev"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)

    # Supabase exposes plain Postgres; local development falls back to SQLite.
    database_url: str = Field(default="sqlite:///./careermatch.db")
    db_pool_pre_ping: bool = True
    db_max_retries: int = Field(default=3, ge=0)
    db_retry_delay_seconds: float = Field(default=1.0, ge=0)

    cors_origins: list[str] = Field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ])

    default_match_limit: int | None = None
    match_limit_mode: Literal["ranked", "legacy"] = "ranked"
    detail_top_n: int = Field(default=10, ge=1)


settings = Settings()
