"""
Listing detail and contact lookup route handlers.
"""
import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from rentscraper.contact import fetch_contact
from rentscraper.details import fetch_details

from ..models import ContactOut, DetailsOut

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["contact"])


def _check_listing_id(listing_id: str) -> None:
    if not listing_id.isdigit():
        raise HTTPException(status_code=400, detail="Listing id must be numeric")


@router.get("/listings/{listing_id}/contact", response_model=ContactOut)
async def get_listing_contact(listing_id: str):
    """Fetch contact details from a listing's detail page. Missing fields are empty strings."""
    _check_listing_id(listing_id)
    contact = await fetch_contact(listing_id)
    return ContactOut(id=listing_id, **asdict(contact))


@router.get("/listings/{listing_id}/details", response_model=DetailsOut)
async def get_listing_details(listing_id: str):
    """Fetch amenities, description and transit distance from a listing's detail page."""
    _check_listing_id(listing_id)
    details = await fetch_details(listing_id)
    if details is None:
        raise HTTPException(status_code=502, detail="Could not read the listing's detail page")
    return DetailsOut(id=listing_id, **asdict(details))
