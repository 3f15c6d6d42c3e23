"""
Listing detail pass: amenities, description and transit distance from a detail page.
"""
import logging
import re
from typing import Callable, Dict, List, Optional

from .browser import BrowserSession
from .config import Settings, settings as default_settings
from .contact import wait_detail_ready
from .models import ListingDetails
from .query import detail_url
from .strategies import DETAIL_INFO_JS, detail_selector_args
from .utils import clean_text

module_logger = logging.getLogger(__name__)

DRY_WET_KEYWORD = "乾濕分離"
MAX_DESCRIPTION_LEN = 500


def _distinct(items) -> List[str]:
    out: List[str] = []
    for item in items or []:
        t = clean_text(item)
        if t and t not in out:
            out.append(t)
    return out


def parse_details(raw: Optional[Dict]) -> ListingDetails:
    """Build ListingDetails from the raw detail page fragments."""
    if not raw:
        return ListingDetails()
    equipment = _distinct(raw.get("equipment"))
    full_description = clean_text(raw.get("description"))
    return ListingDetails(
        equipment=equipment,
        description=full_description[:MAX_DESCRIPTION_LEN],
        has_dry_wet_separation=(
            DRY_WET_KEYWORD in full_description or any(DRY_WET_KEYWORD in e for e in equipment)
        ),
        subway_distance=clean_text(raw.get("subway_distance")),
    )


async def fetch_details(
    listing_id: str,
    cfg: Settings = None,
    logger: Optional[logging.Logger] = None,
    session_factory: Optional[Callable[..., BrowserSession]] = None,
) -> Optional[ListingDetails]:
    """
    Fetch amenities and description for one listing.

    Returns None when the detail page cannot be loaded or read.
    """
    cfg = cfg or default_settings
    logger = logger or module_logger
    listing_id = str(listing_id or "").strip()
    if not re.fullmatch(r"\d+", listing_id):
        logger.warning(f"Not a listing id, skipping detail lookup: {listing_id!r}")
        return None

    url = detail_url(listing_id, cfg.DETAIL_BASE)
    factory = session_factory or BrowserSession
    session = factory(cfg, logger=logger)
    try:
        await session.start()
        page = await session.goto(url, timeout_ms=cfg.DETAIL_NAV_TIMEOUT_MS)
        await wait_detail_ready(page)
        raw = await page.evaluate(DETAIL_INFO_JS, detail_selector_args())
        details = parse_details(raw)
    except Exception as exc:
        logger.warning(f"Detail lookup for {listing_id} failed: {exc}")
        return None
    finally:
        await session.close()

    logger.info(
        f">>> Details for {listing_id}: {len(details.equipment)} amenities, "
        f"dry/wet separation={'yes' if details.has_dry_wet_separation else 'no'}"
    )
    return details
