"""
API Endpoints

Route handlers for the FastAPI application.
"""

import logging
import os
import sys
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from api.schemas import (
    HealthResponse,
    PredictionEventResponse,
    RefreshResponse,
    RefreshTimelineRequest,
    SkipCountsResponse,
    TimelineResponse,
    YearResponse,
    YearSummary
)
from cli.commands import (
    DEFAULT_OUTPUT,
    PipelineOrchestrator,
    load_timeline,
    summarize_timeline,
    write_timeline
)
from pipeline.timeline_grouper import TimelineData, sorted_years
from utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


def get_predictions_path() -> Path:
    """Location of the timeline artifact (env ORACLE_PREDICTIONS_PATH)."""
    return Path(os.environ.get("ORACLE_PREDICTIONS_PATH", DEFAULT_OUTPUT))


def get_orchestrator() -> PipelineOrchestrator:
    return PipelineOrchestrator()


def _load_or_404(path: Path) -> TimelineData:
    if not path.exists():
        logger.warning(f"Timeline artifact not found: {path}")
        raise HTTPException(
            status_code=404,
            detail=f"No timeline found at {path}. Run refresh first."
        )

    try:
        return load_timeline(str(path))
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to load timeline {path}: {e}")
        raise HTTPException(status_code=500, detail=f"Timeline artifact is unreadable: {e}")


def _to_response_events(events) -> list:
    return [PredictionEventResponse(**e.to_dict()) for e in events]


# Health check
@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(path: Path = Depends(get_predictions_path)):
    """Check system health."""
    logger.debug("Health check requested")
    return HealthResponse(
        status="healthy",
        timestamp=utc_now(),
        version="1.0.0",
        timeline_available=path.exists()
    )


# Timeline endpoints
@router.get("/timeline", response_model=TimelineResponse, tags=["Timeline"])
async def get_timeline(path: Path = Depends(get_predictions_path)):
    """Get the full year -> events timeline."""
    logger.info("Getting timeline")
    timeline = _load_or_404(path)

    years = sorted_years(timeline)
    count = sum(len(events) for events in timeline.values())

    logger.info(f"Returning timeline with {count} events across {len(years)} years")
    return TimelineResponse(
        years=years,
        timeline={year: _to_response_events(timeline[year]) for year in years},
        count=count
    )


@router.get("/timeline/{year}", response_model=YearResponse, tags=["Timeline"])
async def get_timeline_year(year: str, path: Path = Depends(get_predictions_path)):
    """Get events for a single year, highest probability first."""
    logger.info(f"Getting timeline for year: {year}")
    timeline = _load_or_404(path)

    if year not in timeline:
        logger.warning(f"Year not in timeline: {year}")
        raise HTTPException(status_code=404, detail=f"No events for year: {year}")

    events = timeline[year]
    return YearResponse(year=year, events=_to_response_events(events), count=len(events))


@router.post("/timeline/refresh", response_model=RefreshResponse, tags=["Timeline"])
def refresh_timeline(
    request: RefreshTimelineRequest = RefreshTimelineRequest(),
    path: Path = Depends(get_predictions_path),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator)
):
    """Rebuild the timeline from Polymarket and overwrite the artifact."""
    logger.info(f"Refreshing timeline (max_markets={request.max_markets})")

    run = orchestrator.build_timeline(max_markets=request.max_markets)

    try:
        write_timeline(run.timeline, str(path))
    except OSError as e:
        logger.error(f"Failed to write timeline {path}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to write timeline: {e}")

    summary = run.summary()
    logger.info(f"Timeline refreshed: {summary['timeline_events']} events")

    return RefreshResponse(
        markets_fetched=summary["markets_fetched"],
        fetch_stopped_reason=summary["fetch_stopped_reason"],
        predictions=summary["predictions"],
        timeline_events=summary["timeline_events"],
        years=[YearSummary(**row) for row in summarize_timeline(run.timeline)],
        skipped=SkipCountsResponse(**summary["skipped"]),
        refreshed_at=utc_now()
    )
