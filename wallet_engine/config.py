"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "wallet-engine"
    log_level: str = "INFO"
    metrics_enabled: bool = True

    # Savings
    minimum_savings_deposit: Decimal = Field(
        default=Decimal("500"),
        ge=0,
        description="Smallest principal accepted when opening a savings account",
    )

    # Loans
    minimum_loan_amount: Decimal = Field(
        default=Decimal("100"),
        ge=0,
        description="Smallest loan request considered eligible",
    )


settings = Settings()
