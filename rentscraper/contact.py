"""
Contact enrichment: phone, LINE ID and contact name from a listing's detail page.

Every lookup runs on its own short-lived browser session and never raises;
fields that cannot be found come back as empty strings.
"""
import logging
import re
import unicodedata
from typing import Callable, Dict, Iterable, Optional

from playwright.async_api import Error as PlaywrightError

from .browser import BrowserSession
from .config import Settings, settings as default_settings
from .models import ContactInfo
from .query import detail_url
from .strategies import DETAIL_EXTRACT_JS, DETAIL_SELECTORS, detail_selector_args
from .utils import clean_text

module_logger = logging.getLogger(__name__)

EXTENSION = r"(?:(?:#|轉|分機|ext\.?|x)\d{1,5})?"
PHONE_PATTERNS = [
    # mobile: 0912-345-678
    re.compile(r"(?<!\d)(09\d{2}-?\d{3}-?\d{3}" + EXTENSION + r")(?!\d)", re.I),
    # landline: 02-2345-6789, (02)2345-6789, 037-123456
    re.compile(r"(?<!\d)(\(?0\d{1,3}\)?-?\d{3,4}-?\d{3,4}" + EXTENSION + r")(?!\d)", re.I),
]

LINE_LABEL_RE = re.compile(r"LINE\s*(?:ID)?\s*[:：]\s*(@?[A-Za-z0-9._\-]{2,40})", re.I)
LINE_URL_RE = re.compile(r"line\.me/(?:R/)?(?:ti/p/)?~?(@?[A-Za-z0-9._\-]{2,40})", re.I)
LINE_HANDLE_RE = re.compile(r"@?[A-Za-z0-9._\-]{2,40}")
LINE_LABELS = {"line", "lineid", "line-id", "line_id"}

NAME_LABEL_RE = re.compile(
    r"(?:仲介|屋主|房東|代理人|經紀人|broker|owner|landlord|agent)\s*[:：]\s*([^\s:：,，|/()（）]{1,20})",
    re.I,
)
MAX_NAME_LEN = 20


def normalize_phone_text(text: str) -> str:
    """Fold full-width digits, drop whitespace and map +886 to a local 0."""
    s = unicodedata.normalize("NFKC", text or "")
    s = re.sub(r"\s+", "", s)
    s = re.sub(r"^\+?886-?\(?0?\)?", "0", s)
    return s


def pick_phone(candidates: Iterable[str]) -> str:
    """First candidate that looks like a Taiwanese phone number."""
    for text in candidates or []:
        s = normalize_phone_text(text)
        for pattern in PHONE_PATTERNS:
            m = pattern.search(s)
            if m:
                return m.group(1)
    return ""


def pick_line_id(elements: Iterable[str], body: str = "") -> str:
    """LINE ID from the dedicated element, else from a 'LINE: id' label in the page text."""
    for text in elements or []:
        t = clean_text(text)
        m = LINE_URL_RE.search(t) or LINE_LABEL_RE.search(t)
        if m:
            return m.group(1)
        if LINE_HANDLE_RE.fullmatch(t) and t.lower() not in LINE_LABELS:
            return t
    m = LINE_LABEL_RE.search(body or "")
    return m.group(1) if m else ""


def pick_contact_name(body: str, candidates: Iterable[str] = ()) -> str:
    """Name after a role label (landlord, owner, broker) or from the name fields."""
    m = NAME_LABEL_RE.search(body or "")
    if m:
        return m.group(1)
    for text in candidates or []:
        t = clean_text(text)
        if not t:
            continue
        m = NAME_LABEL_RE.search(t)
        if m:
            return m.group(1)
        if len(t) <= MAX_NAME_LEN:
            return t
    return ""


def parse_contact(raw: Optional[Dict]) -> ContactInfo:
    """Build a ContactInfo from the detail page fragments; each field is independent."""
    if not raw:
        return ContactInfo()
    body = raw.get("body") or ""
    return ContactInfo(
        phone=pick_phone(raw.get("phones") or []),
        line_id=pick_line_id(raw.get("lines") or [], body),
        contact_name=pick_contact_name(body, raw.get("names") or []),
        title=clean_text(raw.get("title")),
        address=clean_text(raw.get("address")),
    )


async def reveal_phone(page, logger: logging.Logger = None) -> bool:
    """Click the 'show phone' control if there is one. Returns True on a click."""
    logger = logger or module_logger
    for sel in DETAIL_SELECTORS["reveal_phone"]:
        try:
            loc = page.locator(sel).first
            if await loc.is_visible():
                await loc.click(timeout=3000)
                await page.wait_for_timeout(1000)
                return True
        except PlaywrightError as exc:
            logger.debug(f"Reveal-phone selector {sel!r} not usable: {exc}")
    return False


async def wait_detail_ready(page, timeout_ms: int = 10_000) -> bool:
    try:
        await page.wait_for_selector(", ".join(DETAIL_SELECTORS["ready"]), timeout=timeout_ms)
        return True
    except PlaywrightError:
        return False


async def fetch_contact(
    listing_id: str,
    cfg: Settings = None,
    logger: Optional[logging.Logger] = None,
    session_factory: Optional[Callable[..., BrowserSession]] = None,
) -> ContactInfo:
    """
    Fetch contact details for one listing.

    Returns an all-empty ContactInfo when the page cannot be loaded.
    """
    cfg = cfg or default_settings
    logger = logger or module_logger
    listing_id = str(listing_id or "").strip()
    if not re.fullmatch(r"\d+", listing_id):
        logger.warning(f"Not a listing id, skipping contact lookup: {listing_id!r}")
        return ContactInfo()

    url = detail_url(listing_id, cfg.DETAIL_BASE)
    factory = session_factory or BrowserSession
    session = factory(cfg, logger=logger)
    try:
        await session.start()
        page = await session.goto(url, timeout_ms=cfg.DETAIL_NAV_TIMEOUT_MS)
        if not await wait_detail_ready(page):
            logger.info(f"Detail page {url} has no title block; extracting anyway")
        await reveal_phone(page, logger)
        raw = await page.evaluate(DETAIL_EXTRACT_JS, detail_selector_args())
        contact = parse_contact(raw)
    except Exception as exc:
        logger.warning(f"Contact lookup for {listing_id} failed: {exc}")
        return ContactInfo()
    finally:
        await session.close()

    found = [name for name, value in (("phone", contact.phone), ("line", contact.line_id),
                                      ("name", contact.contact_name)) if value]
    logger.info(f">>> Contact for {listing_id}: {', '.join(found) if found else 'nothing found'}")
    return contact
