"""
Runtime configuration loaded from the environment (and an optional .env).

Every field can be set with a FOURPILLARS_ prefixed variable, e.g.
FOURPILLARS_CONVERTER_MODULE=chinese_lunar or FOURPILLARS_LOG_LEVEL=DEBUG.
CLI flags take precedence over these values.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FOURPILLARS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Dotted path of the calendar converter module; empty disables it
    converter_module: str = "fourpillars.ephemeris"
    converter_attribute: str = "solar_to_lunar"
    # Seconds to wait for the converter import before giving up
    converter_load_timeout: float = 2.0

    # Swiss Ephemeris data directory; Moshier ephemeris is used when unset
    ephe_path: Optional[str] = None

    log_level: str = "WARNING"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
