"""Runtime settings read from ``FIREBREAK_*`` environment variables or a ``.env`` file."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from firebreak.scenario.io.loaders import DEFAULT_CATALOGUE_PATH


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FIREBREAK_", env_file=".env", extra="ignore")

    equipment_catalogue: Path = DEFAULT_CATALOGUE_PATH
    include_inactive: bool = False
    telemetry_log: Path | None = None
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
