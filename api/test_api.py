"""
Tests for the HTTP API.
"""
import pytest
from fastapi.testclient import TestClient

from api import main
from api.routes import contact as contact_routes
from api.routes import scrape as scrape_routes
from api.state import RUNNING, ScrapeState
from rentscraper.models import ContactInfo, Listing, ListingDetails, ScrapeResult


@pytest.fixture
def client():
    main.app.state.scrape_state = ScrapeState()
    return TestClient(main.app)


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["scrape"] == "idle"


def test_resolve_regions(client):
    """Test area resolution endpoint."""
    response = client.get("/api/regions/resolve", params={"q": "中山 不存在"})
    assert response.status_code == 200
    data = response.json()
    assert data["targets"] == [{"locality_id": 1, "sub_locality_id": 3, "display_name": "台北市-中山區"}]
    assert data["unknown"] == ["不存在"]


def test_list_regions(client):
    """Test supported regions endpoint."""
    data = client.get("/api/regions").json()
    assert "台北市" in data["localities"]
    assert "永和區" in data["sub_localities"]


def test_scrape_runs_in_background(client, monkeypatch):
    """Test that a scrape runs in the background and records its result."""
    calls = []

    async def fake_scrape(targets, params, max_results=None, **kwargs):
        calls.append((targets, params, max_results))
        listing = Listing(id="1", title="套房", price=9000, url="https://rent.591.com.tw/1", region=targets[0].display_name)
        return ScrapeResult(listings=[listing], logs=["Done: total 1 listings"])

    monkeypatch.setattr(scrape_routes, "scrape", fake_scrape)

    response = client.post("/api/scrape", json={"areas": "永和", "min_rent": 8000, "max_rent": 12000, "max_results": 5})
    assert response.status_code == 202
    assert response.json()["status"] == "running"

    status = client.get("/api/scrape/status").json()
    assert status["status"] == "idle"
    assert status["listings"][0]["region"] == "新北市-永和區"
    assert status["logs"] == ["Done: total 1 listings"]
    assert calls[0][2] == 5


def test_scrape_failure_is_recorded(client, monkeypatch):
    """Test that a failed run is recorded in the status."""
    async def failing_scrape(targets, params, max_results=None, **kwargs):
        raise RuntimeError("browser launch failed")

    monkeypatch.setattr(scrape_routes, "scrape", failing_scrape)

    assert client.post("/api/scrape", json={}).status_code == 202
    status = client.get("/api/scrape/status").json()
    assert status["status"] == "idle"
    assert status["error"] == "browser launch failed"


def test_scrape_rejected_while_running(client):
    """Test that a second scrape is refused while one runs."""
    main.app.state.scrape_state.status = RUNNING
    response = client.post("/api/scrape", json={})
    assert response.status_code == 409


def test_scrape_validates_input(client):
    """Test scrape request validation."""
    assert client.post("/api/scrape", json={"min_rent": 12000, "max_rent": 8000}).status_code == 422
    assert client.post("/api/scrape", json={"areas": "不存在"}).status_code == 422
    assert client.post("/api/scrape", json={"max_results": 0}).status_code == 422


def test_contact_lookup(client, monkeypatch):
    """Test the contact endpoint."""
    async def fake_fetch_contact(listing_id):
        return ContactInfo(phone="0912345678", title="套房")

    monkeypatch.setattr(contact_routes, "fetch_contact", fake_fetch_contact)

    response = client.get("/api/listings/19283746/contact")
    assert response.status_code == 200
    assert response.json() == {"id": "19283746", "phone": "0912345678", "line_id": "",
                               "contact_name": "", "title": "套房", "address": ""}


def test_contact_rejects_non_numeric_id(client):
    """Test that non-numeric ids are rejected."""
    assert client.get("/api/listings/unknown-3/contact").status_code == 400


def test_details_lookup(client, monkeypatch):
    """Test the detail endpoint returns amenities and the dry/wet flag."""
    async def fake_fetch_details(listing_id):
        return ListingDetails(equipment=["冷氣"], description="乾濕分離", has_dry_wet_separation=True)

    monkeypatch.setattr(contact_routes, "fetch_details", fake_fetch_details)

    response = client.get("/api/listings/19283746/details")
    assert response.status_code == 200
    assert response.json() == {"id": "19283746", "equipment": ["冷氣"], "description": "乾濕分離",
                               "has_dry_wet_separation": True, "subway_distance": ""}


def test_details_unreadable_page(client, monkeypatch):
    """Test that an unreadable detail page maps to 502."""
    async def fake_fetch_details(listing_id):
        return None

    monkeypatch.setattr(contact_routes, "fetch_details", fake_fetch_details)
    assert client.get("/api/listings/1/details").status_code == 502
    assert client.get("/api/listings/unknown-1/details").status_code == 400
