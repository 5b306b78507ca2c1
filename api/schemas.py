"""
API Schemas

Pydantic models for API request/response validation.
"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


# Request Models

class RefreshTimelineRequest(BaseModel):
    """Request to rebuild the timeline from Polymarket."""
    max_markets: int = Field(
        default=1000,
        ge=1,
        le=10000,
        description="Maximum markets to fetch"
    )


# Response Models

class PredictionEventResponse(BaseModel):
    """A normalized prediction event, in artifact wire format."""
    model_config = ConfigDict(populate_by_name=True)

    event: str
    prob: float
    category: str
    confidence: str
    source: str
    ticker: Optional[str] = None
    price_target: Optional[float] = Field(default=None, alias="priceTarget")
    timeframe: Optional[str] = None
    signal: Optional[str] = None


class TimelineResponse(BaseModel):
    """Full year -> events timeline."""
    years: List[str]
    timeline: Dict[str, List[PredictionEventResponse]]
    count: int


class YearResponse(BaseModel):
    """Events for one year."""
    year: str
    events: List[PredictionEventResponse]
    count: int


class YearSummary(BaseModel):
    """Per-year count and leading event."""
    year: str
    count: int
    top_event: Optional[str] = None
    top_prob: Optional[float] = None


class SkipCountsResponse(BaseModel):
    """Why markets were dropped during processing."""
    no_title: int
    low_volume: int
    no_year: int
    no_prices: int
    invalid_prob: int


class RefreshResponse(BaseModel):
    """Result of a timeline rebuild."""
    markets_fetched: int
    fetch_stopped_reason: Optional[str] = None
    predictions: int
    timeline_events: int
    years: List[YearSummary]
    skipped: SkipCountsResponse
    refreshed_at: datetime


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: datetime
    version: str = "1.0.0"
    timeline_available: bool = False
