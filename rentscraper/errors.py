"""
Exception types raised by the scraper.

Parse-level defects never raise; a malformed card is simply skipped.
``TargetFailure`` is caught per target by the aggregator, contact
enrichment swallows its own failures, and everything else propagates.
"""
from typing import Optional


class ScraperError(Exception):
    """Base class for scraper errors."""


class TargetFailure(ScraperError):
    """Scraping one target failed (navigation timeout, network error)."""

    def __init__(self, message: str, target_name: Optional[str] = None):
        super().__init__(message)
        self.target_name = target_name


class BrowserLaunchError(ScraperError):
    """The browser process or its context could not be started."""
