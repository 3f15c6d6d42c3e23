"""
Command-line entry point for the rental listing scraper.
"""
import argparse
import asyncio
import functools
import os
import sys

from .browser import BrowserSession
from .config import settings
from .contact import fetch_contact
from .details import fetch_details
from .core import scrape
from .export import contact_to_json, details_to_json, save_output_rows
from .models import SearchParams
from .regions import default_targets, resolve_targets, supported_localities, supported_sub_localities
from .utils import init_logger, now_iso

logger = None


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Rental listing scraper with dedup and contact lookup")
    # Logging
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=None,
                    help="Global log level for both console and file (overrides --log-console/--log-file).")
    ap.add_argument("--log-console", choices=lvl_choices, default=os.getenv("LOG_CONSOLE", "INFO"),
                    help="Console log level (default from env LOG_CONSOLE or INFO).")
    ap.add_argument("--log-file", choices=lvl_choices, default=os.getenv("LOG_FILE", "DEBUG"),
                    help="File log level (default from env LOG_FILE or DEBUG).")
    ap.add_argument("--log-file-path", default=os.getenv("LOG_FILE_PATH", "rentscraper.log"),
                    help="Path to log file (default from env LOG_FILE_PATH or rentscraper.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")

    sub = ap.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("scrape", help="Scrape search results for one or more areas")
    sp.add_argument("areas", nargs="*",
                    help="Area names, e.g. 中山 永和, Taipei, or 'all' (default: the stock watch list)")
    sp.add_argument("--min-rent", type=int, default=settings.MIN_RENT, help="Minimum monthly rent")
    sp.add_argument("--max-rent", type=int, default=settings.MAX_RENT, help="Maximum monthly rent")
    sp.add_argument("--max-results", type=int, default=settings.MAX_RESULTS, help="Maximum listings to return")
    sp.add_argument("--keywords", type=str, default="", help="Free-text keyword, e.g. '乾濕分離'")
    sp.add_argument("--headful", action="store_true", help="Show the browser window")
    sp.add_argument("--out", type=str, default="", help="Write results to .json, .csv or .xlsx")

    cp = sub.add_parser("contact", help="Fetch contact details for a listing id")
    cp.add_argument("listing_id", help="Numeric listing id")
    cp.add_argument("--headful", action="store_true", help="Show the browser window")

    dp = sub.add_parser("details", help="Fetch amenities and description for a listing id")
    dp.add_argument("listing_id", help="Numeric listing id")
    dp.add_argument("--headful", action="store_true", help="Show the browser window")

    sub.add_parser("regions", help="List supported cities and districts")

    return ap.parse_args(argv)


def run_scrape_command(args) -> int:
    if args.areas:
        resolution = resolve_targets(" ".join(args.areas))
        if resolution.unknown:
            logger.warning(f"Unknown areas ignored: {', '.join(resolution.unknown)}")
        targets = resolution.targets
        if not targets:
            logger.error("None of the given areas could be resolved")
            return 2
    else:
        targets = default_targets()

    try:
        params = SearchParams(args.min_rent, args.max_rent, args.keywords.strip() or None)
    except ValueError as e:
        logger.error(f"Invalid search parameters: {e}")
        return 2

    logger.info(f">>> Targets: {', '.join(t.display_name for t in targets)}")
    result = asyncio.run(scrape(
        targets, params, max_results=args.max_results,
        headless=False if args.headful else None, logger=logger,
    ))

    for i, x in enumerate(result.listings, 1):
        print(f"{i}. [{x.region}] {x.title} | {x.price} | {x.address} | {x.subway_info} | {x.url}")

    if args.out:
        save_output_rows(result, args.out, logger=logger)
    return 0


def run_contact_command(args) -> int:
    factory = functools.partial(BrowserSession, headless=False if args.headful else None)
    contact = asyncio.run(fetch_contact(args.listing_id, logger=logger, session_factory=factory))
    print(contact_to_json(args.listing_id, contact))
    return 0


def run_details_command(args) -> int:
    factory = functools.partial(BrowserSession, headless=False if args.headful else None)
    details = asyncio.run(fetch_details(args.listing_id, logger=logger, session_factory=factory))
    if details is None:
        logger.error(f"Could not read details for {args.listing_id}")
        return 1
    print(details_to_json(args.listing_id, details))
    return 0


def run_regions_command(args) -> int:
    print("Cities: " + "、".join(supported_localities()))
    print("Districts: " + "、".join(supported_sub_localities()))
    return 0


def main(argv=None):
    args = parse_args(argv)
    eff_console = args.log_level or args.log_console
    eff_file = args.log_level or args.log_file
    global logger
    logger = init_logger(
        console_level=eff_console,
        file_level=eff_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    logger.info(
        f"Logger initialized: console={eff_console}, "
        f"file={'DISABLED' if args.no_file_log else eff_file}, "
        f"path={'N/A' if args.no_file_log else args.log_file_path}"
    )
    logger.info(f">>> Run started at {now_iso()}")

    handlers = {
        "scrape": run_scrape_command,
        "contact": run_contact_command,
        "details": run_details_command,
        "regions": run_regions_command,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
