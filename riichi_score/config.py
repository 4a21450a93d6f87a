from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_title: str = "Riichi Hand Score API"
    result_ttl_hours: int = 24
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="RIICHI_SCORE_")


settings = Settings()
