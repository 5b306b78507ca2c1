"""
Pipeline Module

Core pipeline components for the Market Oracle:
- Text Extractor: Year, ticker, price target, category, signal extraction
- Event Processor: Market filtering and normalization
- Timeline Grouper: Year bucketing and probability ordering
"""

from .text_extractor import (
    TextExtractor,
    extract_year,
    categorize_event,
    extract_ticker,
    extract_price_target,
    determine_signal,
    get_confidence
)
from .event_processor import (
    EventProcessor,
    PredictionEvent,
    ProcessResult,
    SkipCounts,
    OutcomeParseError,
    process_markets
)
from .timeline_grouper import TimelineGrouper, TimelineData, group_by_year

__all__ = [
    "TextExtractor",
    "extract_year",
    "categorize_event",
    "extract_ticker",
    "extract_price_target",
    "determine_signal",
    "get_confidence",
    "EventProcessor",
    "PredictionEvent",
    "ProcessResult",
    "SkipCounts",
    "OutcomeParseError",
    "process_markets",
    "TimelineGrouper",
    "TimelineData",
    "group_by_year"
]
