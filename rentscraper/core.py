"""
Core scraping orchestration: per-target rendering, aggregation and dedup.
"""
import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Union

from playwright.async_api import Error as PlaywrightError

from .browser import BrowserSession, ensure_chromium
from .config import Settings, settings as default_settings
from .errors import TargetFailure
from .extract import extract_cards_on_page, normalize_rows
from .models import Listing, ScrapeResult, SearchParams, Target
from .query import build_search_url

module_logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], Union[None, Awaitable[None]]]


def dedupe_listings(listings: Iterable[Listing]) -> List[Listing]:
    """Drop repeated listing ids; the first occurrence wins and order is kept."""
    seen = set()
    unique: List[Listing] = []
    for listing in listings:
        if listing.id in seen:
            continue
        seen.add(listing.id)
        unique.append(listing)
    return unique


async def _notify(on_progress: Optional[ProgressCallback], line: str, logger: logging.Logger) -> None:
    if on_progress is None:
        return
    try:
        res = on_progress(line)
        if inspect.isawaitable(res):
            await res
    except Exception as exc:
        # Progress sink failures are logged and dropped
        logger.warning(f"Progress callback failed: {exc}")


async def run_scrape(
    session: BrowserSession,
    targets: List[Target],
    params: SearchParams,
    max_results: int,
    on_progress: Optional[ProgressCallback] = None,
    delay: Optional[float] = None,
    logger: Optional[logging.Logger] = None,
) -> ScrapeResult:
    """
    Scrape every target in order on one browser session.

    Each target is rendered, extracted and tagged with its display name.
    A target that fails to load is logged and contributes no listings.
    Results are deduplicated by id (first target wins) and capped at
    ``max_results``. The progress lines are returned in ``logs`` and also
    passed to ``on_progress`` when given.
    """
    if max_results < 0:
        raise ValueError(f"max_results must not be negative, got {max_results}")
    logger = logger or module_logger
    delay = default_settings.INTER_TARGET_DELAY if delay is None else delay
    result = ScrapeResult()

    async def log(line: str) -> None:
        result.logs.append(line)
        logger.info(line)
        await _notify(on_progress, line, logger)

    targets = list(targets)
    collected: List[Listing] = []
    # Cards seen so far in this run; keeps placeholder ids unique across targets
    position = 0

    for i, target in enumerate(targets):
        url = build_search_url(target, params)
        logger.info(f">>> Opening search: {url}")

        try:
            rendered = await session.render(url)
            rows = [] if rendered.empty else await extract_cards_on_page(rendered.page)
            batch = normalize_rows(rows, start=position)
            position += len(rows)
        except (TargetFailure, PlaywrightError) as exc:
            logger.debug(f"Target {target.display_name} failed", exc_info=True)
            await log(f"Scraping {target.display_name}... failed: {exc}")
            batch = []
        else:
            for listing in batch:
                listing.region = target.display_name
            await log(f"Scraping {target.display_name}... found {len(batch)} listings")

        collected.extend(batch)

        if i < len(targets) - 1 and delay > 0:
            await asyncio.sleep(delay)

    unique = dedupe_listings(collected)
    await log(f"Collected {len(collected)} listings ({len(unique)} unique)")

    result.listings = unique[:max_results]
    await log(f"Done: total {len(result.listings)} listings")
    return result


async def scrape(
    targets: List[Target],
    params: SearchParams,
    max_results: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
    headless: Optional[bool] = None,
    cfg: Settings = None,
    logger: Optional[logging.Logger] = None,
) -> ScrapeResult:
    """
    Run one full scrape on a fresh browser session.

    The session is owned by this call and closed when it returns or raises.
    """
    cfg = cfg or default_settings
    logger = logger or module_logger
    max_results = cfg.MAX_RESULTS if max_results is None else max_results

    logger.info(
        f">>> Scrape started: {len(targets)} target(s), rent {params.min_rent}-{params.max_rent}, "
        f"max {max_results}"
    )
    await asyncio.to_thread(ensure_chromium, cfg, logger)

    async with BrowserSession(cfg, headless=headless, logger=logger) as session:
        return await run_scrape(
            session,
            targets,
            params,
            max_results,
            on_progress=on_progress,
            delay=cfg.INTER_TARGET_DELAY,
            logger=logger,
        )
