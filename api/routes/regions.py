"""
Area name resolution route handlers.
"""
from dataclasses import asdict

from fastapi import APIRouter, Query

from rentscraper.regions import resolve_targets, supported_localities, supported_sub_localities

from ..models import RegionsResponse, ResolveResponse, TargetOut

router = APIRouter(prefix="/api", tags=["regions"])


@router.get("/regions", response_model=RegionsResponse)
async def get_regions():
    """List the city and district names the resolver knows."""
    return RegionsResponse(localities=supported_localities(), sub_localities=supported_sub_localities())


@router.get("/regions/resolve", response_model=ResolveResponse)
async def resolve_regions(q: str = Query(..., min_length=1, description="Space-separated area names")):
    """Resolve area names to search targets; unknown names are listed separately."""
    resolution = resolve_targets(q)
    return ResolveResponse(
        targets=[TargetOut(**asdict(t)) for t in resolution.targets],
        unknown=resolution.unknown,
    )
