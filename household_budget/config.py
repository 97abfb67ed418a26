"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "household-budget"
    log_level: str = "INFO"

    # Income variance defaults (percentage is a fraction: 0.01 == 1%)
    variance_percentage_threshold: float = 0.01
    variance_absolute_threshold: float = 1.0

    # Debt projections
    max_payoff_months: int = 360
    projection_months_limit: int = 600  # longest schedule returned by /v1/debt/payoff


settings = Settings()
