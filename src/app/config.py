from __future__ import annotations

from typing import Literal

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    APP_ENV: str = "local"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    STORE_BACKEND: Literal["supabase", "memory"] = "supabase"
    FRONTEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])
    # origens extras liberadas em connect-src do CSP
    CSP_CONNECT_SOURCES: list[str] = Field(default_factory=list)


settings = Settings()
