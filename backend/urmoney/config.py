"""
Configuration settings for the application.
Loads environment variables and provides typed settings.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "ur-money"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # Database
    DATABASE_URL: str = "sqlite:///./data/urmoney.db"
    SEED_DEFAULT_CATEGORIES: bool = True
    DEFAULT_CATEGORY_COLOR: str = "#3B82F6"

    # Built browser client served for non-API paths
    STATIC_DIR: str = "client/build"

    # CORS (Cross-Origin Resource Sharing)
    ALLOWED_ORIGINS: List[str] = ["*"]

    class Config:
        """Pydantic config to load from .env file."""
        env_file = ".env"
        case_sensitive = True


# Create global settings instance
settings = Settings()
