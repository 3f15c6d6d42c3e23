"""
Utility functions for text processing, price parsing, and logging.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Optional


def init_logger(
    name: str = "rentscraper",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = "rentscraper.log"
) -> logging.Logger:
    """Initialize logger with console and optional file handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console_level_num = getattr(logging, console_level.upper(), logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(console_level_num)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:  # Create file handler only if log_file is provided
        file_level_num = getattr(logging, file_level.upper(), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level_num)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def clean_text(s: Optional[str]) -> str:
    """Clean and normalize text by removing extra whitespace."""
    if not s:
        return ""
    s = re.sub(r"\s+", " ", s)
    return s.strip()


# Currency and unit tokens that appear around list prices
PRICE_TOKENS = ("NT$", "NTD", "元/月", "元", "/月", ",")


def parse_price(price_text) -> int:
    """
    Parse a monthly rent into an integer.

    Handles "NT$12,000", "12,000元/月" and plain numbers. Anything that
    does not leave digits behind parses as 0.
    """
    if isinstance(price_text, bool):
        return 0
    if isinstance(price_text, int):
        return max(price_text, 0)
    if not price_text:
        return 0

    s = str(price_text)
    for token in PRICE_TOKENS:
        s = s.replace(token, "")
    digits = re.sub(r"\D", "", s)
    if not digits:
        return 0
    try:
        return int(digits)
    except ValueError:
        return 0


PLACEHOLDER_ID_PREFIX = "unknown-"


def listing_id_from_href(href: Optional[str], index: int) -> str:
    """
    Pull the numeric listing id out of a detail link.

    Falls back to a position-based placeholder so a malformed card never
    aborts extraction of the page. Callers that extract several pages in
    one run pass a run-wide position so placeholders stay unique.
    """
    if href:
        m = re.search(r"/(\d+)(?=[/?#.]|$)", href)
        if m:
            return m.group(1)
        m = re.search(r"-(\d+)\.html", href)
        if m:
            return m.group(1)
    return f"{PLACEHOLDER_ID_PREFIX}{index}"


def is_placeholder_id(listing_id: str) -> bool:
    return str(listing_id or "").startswith(PLACEHOLDER_ID_PREFIX)


# Substring heuristics for the secondary text fragments on a card
ADDRESS_TOKENS = ("區-", "路", "街", "巷", " road", " street", " rd", "district-")
TRANSIT_TOKENS = ("公尺", "捷運", "站", "station", "metro", "mrt", "meters")
LAYOUT_TOKENS = ("房", "坪", "樓", "room", "floor", "ping")


def classify_fragment(text: str) -> Optional[str]:
    """Classify a card text fragment as 'address', 'subway' or 'layout'."""
    t = clean_text(text).lower()
    if not t:
        return None
    if any(tok in t for tok in ADDRESS_TOKENS):
        return "address"
    if any(tok in t for tok in TRANSIT_TOKENS):
        return "subway"
    if any(tok in t for tok in LAYOUT_TOKENS):
        return "layout"
    return None


PLACEHOLDER_IMAGE_MARKERS = (".svg", "post-loading", "placeholder", "nopic")


def normalize_image_url(url: Optional[str]) -> Optional[str]:
    """Return a usable https image URL, or None for placeholders and data URIs."""
    if not url or len(url) < 10:
        return None
    url = url.strip()
    if url.startswith("data:"):
        return None
    lowered = url.lower()
    if any(marker in lowered for marker in PLACEHOLDER_IMAGE_MARKERS):
        return None
    if url.startswith("//"):
        url = "https:" + url
    elif url.startswith("http://"):
        url = "https://" + url[len("http://"):]
    if url.startswith("https://") and len(url) < 2000:
        return url
    return None
