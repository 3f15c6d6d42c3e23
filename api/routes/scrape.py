"""
Scrape trigger and status route handlers.
"""
import logging
from dataclasses import asdict

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request

from rentscraper.core import scrape
from rentscraper.models import SearchParams
from rentscraper.regions import default_targets, resolve_targets

from ..config import config
from ..models import ListingOut, ScrapeRequest, ScrapeStatusOut, TargetOut
from ..state import ScrapeState

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["scrape"])


def get_state(request: Request) -> ScrapeState:
    return request.app.state.scrape_state


def status_out(state: ScrapeState) -> ScrapeStatusOut:
    result = state.result
    return ScrapeStatusOut(
        status=state.status,
        started_at=state.started_at,
        finished_at=state.finished_at,
        targets=[TargetOut(**asdict(t)) for t in state.targets],
        listings=[ListingOut(**asdict(x)) for x in result.listings] if result else [],
        logs=list(result.logs) if result else [],
        error=state.error,
    )


async def run_scrape_job(state: ScrapeState, targets, params: SearchParams, max_results: int) -> None:
    """Run one scrape and record its outcome on the state token."""
    try:
        result = await scrape(targets, params, max_results=max_results)
    except Exception as e:
        logger.error(f"Scrape run failed: {e}", exc_info=True)
        state.finish(error=str(e))
        return
    state.finish(result=result)
    logger.info(f"Scrape run finished with {len(result.listings)} listings")


@router.post("/scrape", response_model=ScrapeStatusOut, status_code=202)
async def start_scrape(body: ScrapeRequest, request: Request, background_tasks: BackgroundTasks):
    """Start a scrape in the background. Returns 409 while another run is in progress."""
    state = get_state(request)

    if body.areas and body.areas.strip():
        resolution = resolve_targets(body.areas)
        if not resolution.targets:
            raise HTTPException(status_code=422, detail=f"Unknown areas: {', '.join(resolution.unknown)}")
        targets = resolution.targets
    else:
        targets = default_targets()

    max_results = body.max_results if body.max_results is not None else config.DEFAULT_MAX_RESULTS
    if not 1 <= max_results <= config.MAX_RESULTS_LIMIT:
        raise HTTPException(status_code=422, detail=f"max_results must be within 1..{config.MAX_RESULTS_LIMIT}")

    try:
        params = SearchParams(
            min_rent=body.min_rent if body.min_rent is not None else config.DEFAULT_MIN_RENT,
            max_rent=body.max_rent if body.max_rent is not None else config.DEFAULT_MAX_RENT,
            keywords=(body.keywords or "").strip() or None,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not state.try_start(targets):
        raise HTTPException(status_code=409, detail="A scrape is already running")

    background_tasks.add_task(run_scrape_job, state, targets, params, max_results)
    return status_out(state)


@router.get("/scrape/status", response_model=ScrapeStatusOut)
async def get_scrape_status(request: Request):
    """Current run state and the last finished run's listings and log lines."""
    return status_out(get_state(request))
