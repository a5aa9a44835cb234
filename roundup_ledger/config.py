"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "roundup-ledger"
    log_level: str = "INFO"

    # Numeric representation: "fractional" (major units) or "minor_units" (integer 1/100)
    numeric_mode: Literal["fractional", "minor_units"] = "fractional"

    # Projection
    retirement_age: int = 60
    nps_rate: float = 0.0711
    index_rate: float = 0.1449

    # Policies per call path
    filter_drop_zero_remanent: bool = True
    returns_drop_zero_remanent: bool = False
    tax_benefit_scope: Literal["per_window", "global"] = "per_window"


settings = Settings()
