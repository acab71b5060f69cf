"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./loan_ledger.db"

    # Service
    service_name: str = "loan-ledger"
    log_level: str = "INFO"

    # Ledger rules
    minimum_interest_days: int = 30  # Loans settled earlier still owe this many days of interest

    # Stats
    recent_sync_limit: int = 5


settings = Settings()
