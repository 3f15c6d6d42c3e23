"""
Search and detail URL construction for the rental site.
"""
from urllib.parse import urlencode

from .config import settings
from .models import SearchParams, Target


# Amenity filters applied to every search: near transit, cooking allowed
AMENITY_FILTERS = ("near_subway", "cook")


def build_search_url(target: Target, params: SearchParams, base_url: str = None) -> str:
    """Build the search-results URL for one target."""
    query = [("region", str(target.locality_id))]
    if target.sub_locality_id is not None:
        query.append(("section", str(target.sub_locality_id)))
    query.append(("price", f"{params.min_rent}_{params.max_rent}"))
    query.append(("other", ",".join(AMENITY_FILTERS)))
    keywords = (params.keywords or "").strip()
    if keywords:
        query.append(("keywords", keywords))
    return f"{base_url or settings.BASE_URL}?{urlencode(query)}"


def detail_url(listing_id: str, detail_base: str = None) -> str:
    """Canonical detail page of a listing."""
    return f"{(detail_base or settings.DETAIL_BASE).rstrip('/')}/{listing_id}"
