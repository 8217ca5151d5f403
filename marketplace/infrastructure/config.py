"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://marketplace:marketplace_dev_password@db:5432/marketplace"

    # Authentication
    marketplace_api_key: str = "dev-api-key-change-in-production"
    seller_header: str = "X-Seller-ID"

    # Collections
    preview_limit: int = 50

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
