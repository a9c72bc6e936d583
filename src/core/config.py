from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(default="sqlite+aiosqlite:///./pricing.db", alias="DATABASE_URL")
    price_solver_tolerance: float = Field(default=0.01, gt=0, alias="PRICE_SOLVER_TOLERANCE")
    price_solver_max_iterations: int = Field(default=10, ge=1, alias="PRICE_SOLVER_MAX_ITERATIONS")
    default_settings_profile: str = Field(default="default", alias="DEFAULT_SETTINGS_PROFILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
