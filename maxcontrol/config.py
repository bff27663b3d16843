"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./maxcontrol.db"

    # Service
    service_name: str = "maxcontrol"
    log_level: str = "INFO"

    # Pricing
    card_surcharge_percentage: float = 15.0  # Applied on top of the cash price
    max_installments: int = 24

    # Accounts payable listing
    payables_page_limit: int = 500


settings = Settings()
