"""
Pydantic models for API request/response serialization.
"""
from typing import List, Optional
from pydantic import BaseModel


class TargetOut(BaseModel):
    """A resolved search target."""
    locality_id: int
    sub_locality_id: Optional[int] = None
    display_name: str


class ResolveResponse(BaseModel):
    """Result of resolving typed area names."""
    targets: List[TargetOut]
    unknown: List[str]


class RegionsResponse(BaseModel):
    """Names the resolver understands."""
    localities: List[str]
    sub_localities: List[str]


class ListingOut(BaseModel):
    """Output model for listing data."""
    id: str
    title: str
    price: int
    url: str
    address: str = ""
    subway_info: str = ""
    layout: str = ""
    tags: List[str] = []
    images: List[str] = []
    region: str = ""


class ScrapeRequest(BaseModel):
    """Parameters for one scrape run. ``areas`` defaults to the stock watch list."""
    areas: Optional[str] = None
    min_rent: Optional[int] = None
    max_rent: Optional[int] = None
    max_results: Optional[int] = None
    keywords: Optional[str] = None


class ScrapeStatusOut(BaseModel):
    """Current scrape state and the outcome of the last run."""
    status: str
    started_at: Optional[str] = None
    finished_at: Optional[str] = None
    targets: List[TargetOut] = []
    listings: List[ListingOut] = []
    logs: List[str] = []
    error: Optional[str] = None


class DetailsOut(BaseModel):
    """Amenities and description of one listing."""
    id: str
    equipment: List[str] = []
    description: str = ""
    has_dry_wet_separation: bool = False
    subway_distance: str = ""


class ContactOut(BaseModel):
    """Contact details of one listing; empty strings mean unknown."""
    id: str
    phone: str = ""
    line_id: str = ""
    contact_name: str = ""
    title: str = ""
    address: str = ""
