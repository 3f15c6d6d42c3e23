"""
Tests for multi-target aggregation, dedup and progress reporting.
"""
import asyncio

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from rentscraper.core import dedupe_listings, run_scrape
from rentscraper.errors import TargetFailure
from rentscraper.models import Listing, SearchParams, Target

PARAMS = SearchParams(min_rent=8000, max_rent=12000)
CITY_A = Target(locality_id=1, sub_locality_id=1, display_name="City-A")
CITY_B = Target(locality_id=3, sub_locality_id=37, display_name="City-B")


def run(session, targets, max_results=20, **kwargs):
    return asyncio.run(run_scrape(session, targets, PARAMS, max_results, delay=0, **kwargs))


def test_cap_and_log_lines(fake_session, row_factory):
    """Test the result cap, region tags and progress lines."""
    session = fake_session([[row_factory(str(100 + i)) for i in range(7)]])
    result = run(session, [CITY_A], max_results=5)

    assert len(result.listings) == 5
    assert [x.id for x in result.listings] == ["100", "101", "102", "103", "104"]
    assert all(x.region == "City-A" for x in result.listings)
    assert len([line for line in result.logs if "found 7" in line]) == 1
    assert "total 5" in result.logs[-1]
    assert "region=1" in session.urls[0] and "section=1" in session.urls[0]


def test_duplicate_ids_keep_first_target(fake_session, row_factory):
    """Test that a repeated id keeps the first target's copy."""
    session = fake_session([
        [row_factory("999", title="A 的套房"), row_factory("1")],
        [row_factory("2"), row_factory("999", title="B 的套房")],
    ])
    result = run(session, [CITY_A, CITY_B])

    dupes = [x for x in result.listings if x.id == "999"]
    assert len(dupes) == 1
    assert dupes[0].region == "City-A"
    assert dupes[0].title == "A 的套房"
    assert [x.id for x in result.listings] == ["999", "1", "2"]
    assert any("Collected 4 listings (3 unique)" in line for line in result.logs)


def test_target_failure_does_not_abort_run(fake_session, row_factory):
    """Test that a failing target is logged and the run continues."""
    session = fake_session([
        TargetFailure("navigation timed out"),
        [row_factory("5")],
    ])
    result = run(session, [CITY_A, CITY_B])

    assert [x.id for x in result.listings] == ["5"]
    assert result.listings[0].region == "City-B"
    assert any("City-A" in line and "failed" in line for line in result.logs)
    assert any("City-B" in line and "found 1" in line for line in result.logs)


def test_playwright_timeout_is_target_level(fake_session, row_factory):
    """Test that a Playwright timeout only skips its target."""
    session = fake_session([PlaywrightTimeout("Timeout 60000ms exceeded"), [row_factory("5")]])
    result = run(session, [CITY_A, CITY_B])
    assert [x.id for x in result.listings] == ["5"]


def test_empty_page_yields_no_listings(fake_session):
    """Test that a page without listings reports zero."""
    result = run(fake_session(["empty"]), [CITY_A])
    assert result.listings == []
    assert any("found 0" in line for line in result.logs)
    assert "total 0" in result.logs[-1]


def test_unexpected_error_propagates(fake_session):
    """Test that unexpected errors abort the run."""
    session = fake_session([RuntimeError("boom")])
    with pytest.raises(RuntimeError):
        run(session, [CITY_A])


def test_progress_callback_receives_lines(fake_session, row_factory):
    """Test that the callback sees every progress line."""
    lines = []
    result = run(fake_session([[row_factory("1")]]), [CITY_A], on_progress=lines.append)
    assert lines == result.logs


def test_async_progress_callback(fake_session, row_factory):
    """Test that coroutine callbacks are awaited."""
    lines = []

    async def on_progress(line):
        lines.append(line)

    result = run(fake_session([[row_factory("1")]]), [CITY_A], on_progress=on_progress)
    assert lines == result.logs


def test_failing_progress_callback_is_ignored(fake_session, row_factory):
    """Test that a failing callback does not stop the run."""
    def on_progress(line):
        raise ConnectionError("notifier down")

    result = run(fake_session([[row_factory("1")], [row_factory("2")]]), [CITY_A, CITY_B], on_progress=on_progress)
    assert [x.id for x in result.listings] == ["1", "2"]


def test_negative_cap_is_rejected(fake_session):
    """Test that a negative cap raises ValueError."""
    with pytest.raises(ValueError):
        run(fake_session([]), [CITY_A], max_results=-1)


def test_no_targets():
    result = asyncio.run(run_scrape(None, [], PARAMS, 5, delay=0))
    assert result.listings == []
    assert "total 0" in result.logs[-1]


def test_dedupe_listings_preserves_order():
    """Test first-wins dedup keeps the original order."""
    listings = [Listing(id=i, title="t", price=1, url="") for i in ["3", "1", "3", "2", "1"]]
    assert [x.id for x in dedupe_listings(listings)] == ["3", "1", "2"]


def test_placeholder_ids_are_unique_across_targets(fake_session, row_factory):
    """Test that cards without a numeric link on different targets are all kept."""
    session = fake_session([
        [row_factory("x", title="A 套房", href="javascript:void(0)")],
        [row_factory("x", title="B 套房", href="javascript:void(0)")],
    ])
    result = run(session, [CITY_A, CITY_B])

    assert [(x.title, x.region) for x in result.listings] == [("A 套房", "City-A"), ("B 套房", "City-B")]
    assert len({x.id for x in result.listings}) == 2
    assert all(x.id.startswith("unknown-") for x in result.listings)
    assert any("Collected 2 listings (2 unique)" in line for line in result.logs)


def test_placeholder_positions_count_dropped_cards(fake_session, row_factory):
    """Test that run-wide card positions include cards that failed to parse."""
    session = fake_session([
        [row_factory("1", title=""), row_factory("x", href="")],
        [row_factory("x", href="")],
    ])
    result = run(session, [CITY_A, CITY_B])
    assert [x.id for x in result.listings] == ["unknown-1", "unknown-2"]
