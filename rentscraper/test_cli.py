"""
Tests for the command-line entry point.
"""
import pytest

from rentscraper import cli
from rentscraper.models import ListingDetails


def test_imports():
    """Test that the public package surface imports."""
    import rentscraper
    from rentscraper import fetch_contact, resolve_targets, run_scrape, scrape

    assert rentscraper.__version__
    assert callable(run_scrape) and callable(scrape)
    assert callable(fetch_contact) and callable(resolve_targets)


def test_parse_scrape_args():
    """Test parsing of the scrape subcommand and logging flags."""
    args = cli.parse_args(["--no-file-log", "scrape", "中山", "永和", "--max-results", "5", "--out", "r.json"])
    assert args.command == "scrape"
    assert args.areas == ["中山", "永和"]
    assert args.max_results == 5
    assert args.out == "r.json"
    assert args.no_file_log


def test_parse_contact_args():
    """Test parsing of the contact subcommand."""
    args = cli.parse_args(["contact", "19283746"])
    assert args.command == "contact"
    assert args.listing_id == "19283746"


def test_command_is_required():
    """Test that a subcommand must be given."""
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_regions_command(capsys):
    """Test that the regions command lists cities and districts."""
    assert cli.main(["--no-file-log", "regions"]) == 0
    out = capsys.readouterr().out
    assert "台北市" in out
    assert "永和區" in out


def test_scrape_command_rejects_unknown_areas():
    """Test that a scrape with only unknown areas exits with 2."""
    assert cli.main(["--no-file-log", "scrape", "不存在"]) == 2


def test_scrape_command_rejects_bad_rent():
    """Test that inverted rent bounds exit with 2."""
    assert cli.main(["--no-file-log", "scrape", "中山", "--min-rent", "9000", "--max-rent", "8000"]) == 2


def test_parse_details_args():
    """Test parsing of the details subcommand."""
    args = cli.parse_args(["details", "19283746", "--headful"])
    assert args.command == "details"
    assert args.listing_id == "19283746"
    assert args.headful


def test_details_command_prints_json(monkeypatch, capsys):
    """Test that the details command prints the detail record as JSON."""
    async def fake_fetch_details(listing_id, logger=None, session_factory=None):
        return ListingDetails(equipment=["冷氣"], has_dry_wet_separation=True)

    monkeypatch.setattr(cli, "fetch_details", fake_fetch_details)
    assert cli.main(["--no-file-log", "details", "19283746"]) == 0
    out = capsys.readouterr().out
    assert '"has_dry_wet_separation": true' in out
    assert "冷氣" in out


def test_details_command_failure(monkeypatch):
    """Test that an unreadable detail page gives a non-zero exit code."""
    async def fake_fetch_details(listing_id, logger=None, session_factory=None):
        return None

    monkeypatch.setattr(cli, "fetch_details", fake_fetch_details)
    assert cli.main(["--no-file-log", "details", "1"]) == 1
