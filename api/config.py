"""
API configuration and settings management.
"""
import os

from rentscraper.config import settings as scraper_settings


class Config:
    """Application configuration."""

    # API settings
    API_TITLE: str = "Rental Scraper API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "HTTP interface for rental listing scrapes and contact lookups"

    # CORS settings
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # Scrape defaults
    DEFAULT_MIN_RENT: int = scraper_settings.MIN_RENT
    DEFAULT_MAX_RENT: int = scraper_settings.MAX_RENT
    DEFAULT_MAX_RESULTS: int = scraper_settings.MAX_RESULTS
    MAX_RESULTS_LIMIT: int = int(os.getenv("API_MAX_RESULTS_LIMIT", "200"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("API_LOG_FILE", "api.log")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration on startup."""
        scraper_settings.validate()
        if cls.DEFAULT_MAX_RESULTS > cls.MAX_RESULTS_LIMIT:
            raise ValueError(
                f"MAX_RESULTS ({cls.DEFAULT_MAX_RESULTS}) exceeds API_MAX_RESULTS_LIMIT ({cls.MAX_RESULTS_LIMIT})"
            )


# Global config instance
config = Config()
