import os
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: Optional[str] = Field(None, alias="LESSON_DATABASE_URL")
    database_pool_size: int = Field(10, alias="LESSON_DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(10, alias="LESSON_DATABASE_MAX_OVERFLOW")
    database_echo: bool = Field(False, alias="LESSON_DATABASE_ECHO")
    database_auto_create: bool = Field(False, alias="LESSON_DATABASE_AUTO_CREATE")
    lesson_duration_seconds: int = Field(5400, ge=1, alias="LESSON_DURATION_SECONDS")
    warning_band_seconds: int = Field(600, ge=0, alias="LESSON_WARNING_BAND_SECONDS")
    default_start_time: str = Field("14:00:00", alias="LESSON_DEFAULT_START_TIME")
    max_saved_plans: Optional[int] = Field(None, ge=1, alias="LESSON_MAX_SAVED_PLANS")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid backend configuration: {exc}") from exc
