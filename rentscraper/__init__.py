"""
Rental Listing Scraper Package
"""
from .models import ContactInfo, Listing, ListingDetails, Resolution, ScrapeResult, SearchParams, Target
from .errors import BrowserLaunchError, ScraperError, TargetFailure
from .regions import default_targets, resolve_target, resolve_targets
from .query import build_search_url, detail_url
from .browser import BrowserSession, RenderResult
from .extract import extract_listings
from .core import dedupe_listings, run_scrape, scrape
from .contact import fetch_contact
from .details import fetch_details
from .export import save_output_rows
from .utils import init_logger, now_iso, parse_price

__version__ = "1.0.0"

__all__ = [
    "Target",
    "SearchParams",
    "Listing",
    "ContactInfo",
    "ListingDetails",
    "ScrapeResult",
    "Resolution",
    "ScraperError",
    "TargetFailure",
    "BrowserLaunchError",
    "resolve_target",
    "resolve_targets",
    "default_targets",
    "build_search_url",
    "detail_url",
    "BrowserSession",
    "RenderResult",
    "extract_listings",
    "run_scrape",
    "scrape",
    "dedupe_listings",
    "fetch_contact",
    "fetch_details",
    "save_output_rows",
    "init_logger",
    "now_iso",
    "parse_price"
]
