"""
Scraper configuration and settings management.
"""
import os
from pathlib import Path


PACKAGE_DIR = Path(__file__).resolve().parent


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Scraper settings, read from the environment at import time."""

    # Site
    BASE_URL: str = os.getenv("RENT_BASE_URL", "https://rent.591.com.tw/list")
    DETAIL_BASE: str = os.getenv("RENT_DETAIL_BASE", "https://rent.591.com.tw")

    # Browser
    HEADLESS: bool = _env_bool("HEADLESS", True)
    USER_AGENT: str = os.getenv(
        "SCRAPER_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36",
    )
    VIEWPORT_WIDTH: int = _env_int("VIEWPORT_WIDTH", 1920)
    VIEWPORT_HEIGHT: int = _env_int("VIEWPORT_HEIGHT", 1080)
    LOCALE: str = os.getenv("SCRAPER_LOCALE", "zh-TW")

    # Timeouts (ms)
    NAV_TIMEOUT_MS: int = _env_int("NAV_TIMEOUT_MS", 60_000)
    SELECTOR_TIMEOUT_MS: int = _env_int("SELECTOR_TIMEOUT_MS", 30_000)
    DETAIL_NAV_TIMEOUT_MS: int = _env_int("DETAIL_NAV_TIMEOUT_MS", 30_000)

    # Lazy-load scrolling
    SCROLL_STEP_PX: int = _env_int("SCROLL_STEP_PX", 500)
    SCROLL_MAX_PX: int = _env_int("SCROLL_MAX_PX", 3000)
    SCROLL_MAX_ITERATIONS: int = _env_int("SCROLL_MAX_ITERATIONS", 20)
    SCROLL_INTERVAL_MS: int = _env_int("SCROLL_INTERVAL_MS", 200)
    SETTLE_MS: int = _env_int("SETTLE_MS", 1000)

    # Pacing between targets (seconds)
    INTER_TARGET_DELAY: float = _env_float("INTER_TARGET_DELAY", 3.0)

    # Search defaults
    MIN_RENT: int = _env_int("MIN_RENT", 8000)
    MAX_RENT: int = _env_int("MAX_RENT", 12000)
    MAX_RESULTS: int = _env_int("MAX_RESULTS", 20)

    # Locality table (verify ids against the live site when they drift)
    LOCALITIES_FILE: str = os.getenv(
        "RENT_LOCALITIES_FILE", str(PACKAGE_DIR / "data" / "localities.json")
    )

    # Browser binaries
    BROWSER_CACHE: str = os.getenv(
        "PLAYWRIGHT_BROWSERS_PATH",
        os.path.join(os.path.expanduser("~"), ".cache", "ms-playwright"),
    )
    BROWSER_AUTO_INSTALL: bool = _env_bool("BROWSER_AUTO_INSTALL", True)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration before a run."""
        if not os.path.exists(cls.LOCALITIES_FILE):
            raise FileNotFoundError(f"Locality table not found: {cls.LOCALITIES_FILE}")
        if cls.MIN_RENT >= cls.MAX_RENT:
            raise ValueError(f"MIN_RENT ({cls.MIN_RENT}) must be lower than MAX_RENT ({cls.MAX_RENT})")
        if cls.MAX_RESULTS < 1:
            raise ValueError(f"MAX_RESULTS must be positive, got {cls.MAX_RESULTS}")


# Global settings instance
settings = Settings()
