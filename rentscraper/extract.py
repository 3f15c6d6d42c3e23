"""
Listing extraction from a rendered search-results page.
"""
import logging
from typing import Dict, List, Optional

from playwright.async_api import Error as PlaywrightError

from .errors import TargetFailure
from .models import Listing
from .query import detail_url
from .strategies import LIST_EXTRACT_JS, list_selector_args
from .utils import (
    clean_text, classify_fragment, is_placeholder_id, listing_id_from_href, normalize_image_url, parse_price,
)

logger = logging.getLogger(__name__)


async def extract_cards_on_page(page) -> List[Dict]:
    """Collect raw text fragments for every listing card on the page."""
    try:
        rows = await page.evaluate(LIST_EXTRACT_JS, list_selector_args())
    except PlaywrightError as exc:
        raise TargetFailure(f"card extraction failed: {exc}") from exc
    return list(rows or [])


def _distinct_images(sources) -> List[str]:
    images: List[str] = []
    for src in sources or []:
        url = normalize_image_url(src)
        if url and url not in images:
            images.append(url)
    return images


def normalize_listing(row: Optional[Dict], index: int) -> Optional[Listing]:
    """
    Convert one raw card into a Listing.

    Returns None for cards without a title or a positive price; those are
    parse failures, not free listings.
    """
    if not row:
        return None

    title = clean_text(row.get("title"))
    price = parse_price(row.get("price_text"))
    if not title or price <= 0:
        return None

    href = clean_text(row.get("href"))
    listing_id = listing_id_from_href(href, index)
    if is_placeholder_id(listing_id):
        # No canonical detail page; keep whatever link the card had
        url = href if href.startswith(("http://", "https://")) else ""
    else:
        url = detail_url(listing_id)

    fields = {"address": "", "subway": "", "layout": ""}
    for fragment in row.get("info") or []:
        kind = classify_fragment(fragment)
        if kind and not fields[kind]:
            fields[kind] = clean_text(fragment)

    tags = [clean_text(t) for t in row.get("tags") or [] if clean_text(t)]

    return Listing(
        id=listing_id,
        title=title,
        price=price,
        url=url,
        address=fields["address"],
        subway_info=fields["subway"],
        layout=fields["layout"],
        tags=tags,
        images=_distinct_images(row.get("images")),
    )


def normalize_rows(rows: List[Optional[Dict]], start: int = 0) -> List[Listing]:
    """
    Normalize raw cards in page order, dropping the ones that fail to parse.

    ``start`` is the position of the first card within the whole run; it
    numbers placeholder ids so they never collide across pages.
    """
    listings: List[Listing] = []
    for index, row in enumerate(rows, start):
        try:
            listing = normalize_listing(row, index)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.debug(f"Skipping malformed card #{index}: {exc}")
            continue
        if listing is not None:
            listings.append(listing)
    dropped = len(rows) - len(listings)
    if dropped:
        logger.debug(f"Dropped {dropped} of {len(rows)} cards without title or price")
    return listings


async def extract_listings(page, start: int = 0) -> List[Listing]:
    """Extract every valid listing visible on a rendered results page."""
    rows = await extract_cards_on_page(page)
    return normalize_rows(rows, start)
