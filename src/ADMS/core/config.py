# src/ADMS/core/config.py
from __future__ import annotations

import json

from pydantic import AnyHttpUrl, Field, AliasChoices, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ---- App ----
    APP_NAME: str = "ADMS API"
    APP_VERSION: str = "0.1.0"

    # ---- DB ----
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./adms.db",
        validation_alias=AliasChoices("ADMS_DATABASE_URL", "DATABASE_URL"),
    )
    DB_ECHO: bool = False
    TESTING: bool = Field(
        default=False,
        validation_alias=AliasChoices("ADMS_TESTING", "TESTING"),
    )

    # ---- Logging ----
    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias=AliasChoices("ADMS_LOG_LEVEL", "LOG_LEVEL"),
    )
    LOG_JSON: bool = Field(
        default=False,
        validation_alias=AliasChoices("ADMS_LOG_JSON", "LOG_JSON"),
    )

    # ---- Seeding ----
    SEED_BATCH_SIZE: int = Field(default=1000, ge=1)
    SLUG_MAX_ATTEMPTS: int = Field(default=100, ge=1)

    # ---- Web / CORS ----
    # Raw env value (JSON or CSV). Only the validator fills `cors_origins`.
    cors_origins_raw: str | None = Field(
        default=None,
        validation_alias=AliasChoices("CORS_ORIGINS"),
    )
    cors_origins: list[AnyHttpUrl] = Field(
        default_factory=list,
        validation_alias=AliasChoices("CORS_ORIGINS_PARSED_DO_NOT_USE"),
    )

    @model_validator(mode="after")
    def _normalize_cors(self):
        raw = self.cors_origins_raw
        if not raw:
            return self
        s = raw.strip()
        try:
            parsed = json.loads(s)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            self.cors_origins = parsed
            return self
        # Fallback to CSV
        self.cors_origins = [p.strip() for p in s.split(",") if p.strip()]
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )


settings = Settings()
