"""
Tests for search and detail URL building.
"""
from urllib.parse import parse_qs, urlsplit

from rentscraper.models import SearchParams, Target
from rentscraper.query import build_search_url, detail_url

BASE = "https://rent.591.com.tw/list"


def test_search_url_with_section():
    """Test a district search URL."""
    url = build_search_url(Target(1, "X", 3), SearchParams(8000, 12000), base_url=BASE)
    assert "region=1" in url
    assert "section=3" in url
    assert "price=8000_12000" in url
    assert url.startswith(BASE + "?")


def test_search_url_parameter_contract():
    """Test the query parameter names and order."""
    url = build_search_url(Target(3, "新北市全區"), SearchParams(8000, 15000, "乾濕分離"), base_url=BASE)
    query = parse_qs(urlsplit(url).query)
    assert query["region"] == ["3"]
    assert "section" not in query
    assert query["price"] == ["8000_15000"]
    assert query["other"] == ["near_subway,cook"]
    assert query["keywords"] == ["乾濕分離"]


def test_search_url_encodes_free_text():
    """Test that keywords are URL-encoded."""
    url = build_search_url(Target(1, "X"), SearchParams(8000, 12000, "a&b c"), base_url=BASE)
    assert "keywords=a%26b+c" in url
    assert "乾" not in build_search_url(Target(1, "X"), SearchParams(8000, 12000, "乾濕分離"), base_url=BASE)


def test_search_url_without_keywords():
    """Test that an empty keyword is omitted."""
    url = build_search_url(Target(1, "X"), SearchParams(8000, 12000, "  "), base_url=BASE)
    assert "keywords" not in url


def test_search_url_is_deterministic():
    """Test that the same input gives the same URL."""
    target, params = Target(1, "X", 3), SearchParams(8000, 12000)
    assert build_search_url(target, params) == build_search_url(target, params)


def test_detail_url():
    assert detail_url("19283746", "https://rent.591.com.tw/") == "https://rent.591.com.tw/19283746"
