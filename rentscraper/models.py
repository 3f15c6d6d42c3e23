"""
Data models for the rental listing scraper.
"""
from dataclasses import dataclass, field
from typing import List, Optional


# Rent bounds the search form accepts
MAX_RENT_LIMIT = 1_000_000


@dataclass(frozen=True)
class Target:
    """One scrapable scope: a locality, optionally narrowed to a sub-locality."""

    locality_id: int
    display_name: str
    sub_locality_id: Optional[int] = None

    @property
    def is_whole_locality(self) -> bool:
        return self.sub_locality_id is None


@dataclass(frozen=True)
class SearchParams:
    """Rent bounds and optional free-text keyword for one pipeline run."""

    min_rent: int
    max_rent: int
    keywords: Optional[str] = None

    def __post_init__(self):
        for name in ("min_rent", "max_rent"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0 or value > MAX_RENT_LIMIT:
                raise ValueError(f"{name} must be within 1..{MAX_RENT_LIMIT}, got {value}")
        if self.min_rent >= self.max_rent:
            raise ValueError(
                f"min_rent ({self.min_rent}) must be lower than max_rent ({self.max_rent})"
            )


@dataclass
class Listing:
    """A rental listing as extracted from a search-results page."""

    # Basic listing info
    id: str
    title: str
    price: int
    url: str

    # Secondary text fragments, classified at extraction time
    address: str = ""
    subway_info: str = ""
    layout: str = ""

    # Media and labels
    tags: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)

    # Set by the aggregator to the originating target's display name
    region: str = ""

    @property
    def image(self) -> str:
        """Primary image URL, or empty string."""
        return self.images[0] if self.images else ""


@dataclass
class ContactInfo:
    """Contact details scraped from a listing's detail page.

    Every field defaults to an empty string; a missing value is not an error.
    """

    phone: str = ""
    line_id: str = ""
    contact_name: str = ""
    title: str = ""
    address: str = ""

    @property
    def is_empty(self) -> bool:
        return not any((self.phone, self.line_id, self.contact_name, self.title, self.address))


@dataclass
class ListingDetails:
    """Amenities and description from a listing's detail page."""

    equipment: List[str] = field(default_factory=list)
    description: str = ""
    has_dry_wet_separation: bool = False
    subway_distance: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.equipment or self.description or self.subway_distance)


@dataclass
class ScrapeResult:
    """Listings returned by one aggregation run together with its progress log."""

    listings: List[Listing] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)


@dataclass
class Resolution:
    """Outcome of resolving a space-separated list of area names."""

    targets: List[Target] = field(default_factory=list)
    unknown: List[str] = field(default_factory=list)
