from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Default file locations used by the CLI ---
    JSON_INPUT_PATH: str = "user_full.json"
    JSON_PATCH_PATH: str = "patch_full.json"
    JSON_OUTPUT_PATH: str = "user_full_patched.json"

    XML_INPUT_PATH: str = "user_full.xml"
    XML_PATCH_PATH: str = "patch_full.xml"
    XML_OUTPUT_PATH: str = "user_full_patched.xml"

    # --- Serialization ---
    ENCODING: str = "utf-8"
    JSON_INDENT: int = 2
    XML_PRETTY_PRINT: bool = True

    LOG_LEVEL: str = "WARNING"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
