"""Engine Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache), single instance per process
    - Settings never add or remove calculators; the set is fixed by build_default_service()
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings from CLINICALC_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CLINICALC_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Registry
    warn_on_overwrite: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
