"""
Event Processor

Filters raw Polymarket market records and maps the survivors into
normalized PredictionEvent records.

Gates (in order, first failure drops the record):
1. Missing question text
2. Volume below $5,000
3. No extractable year (question, then description)
4. Unparseable outcome prices / non-numeric probability
5. Zero probability
6. Non-finance category
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pipeline.text_extractor import (
    OTHER_CATEGORY,
    categorize_event,
    determine_signal,
    extract_price_target,
    extract_ticker,
    extract_year,
    get_confidence,
)

logger = logging.getLogger(__name__)


MIN_VOLUME = 5000.0
SOURCE_POLYMARKET = "polymarket"


class OutcomeParseError(ValueError):
    """Raised when an outcome field cannot be decoded into a list."""


@dataclass(frozen=True)
class RawJSON:
    """Outcome field that arrived as a JSON-encoded string."""
    text: str


@dataclass(frozen=True)
class Parsed:
    """Outcome field that arrived as an already-decoded list."""
    values: Tuple[Any, ...]


OutcomeField = Union[RawJSON, Parsed]


def normalize_outcome_field(value: Any) -> OutcomeField:
    """
    Classify a wire value for `outcomes` / `outcomePrices`.

    Gamma returns these either as lists or as JSON strings such as
    '["Yes", "No"]'. Absent values become an empty Parsed.
    """
    if value is None:
        return Parsed(())
    if isinstance(value, str):
        return RawJSON(value)
    if isinstance(value, (list, tuple)):
        return Parsed(tuple(value))
    raise OutcomeParseError(f"Unsupported outcome field type: {type(value).__name__}")


def resolve_outcome_field(outcome_field: OutcomeField) -> List[Any]:
    """Decode an OutcomeField into a plain list."""
    if isinstance(outcome_field, Parsed):
        return list(outcome_field.values)

    if not outcome_field.text:
        return []

    try:
        decoded = json.loads(outcome_field.text)
    except (json.JSONDecodeError, TypeError) as e:
        raise OutcomeParseError(f"Invalid outcome JSON: {e}") from e

    if not isinstance(decoded, list):
        raise OutcomeParseError(f"Outcome JSON is not a list: {outcome_field.text[:50]}")

    return decoded


def parse_volume(value: Any) -> float:
    """
    Parse traded volume; absent or unparseable volume counts as 0.

    Parsing is strict `float()`: trailing junk such as "5000abc" is
    unparseable (0) rather than read as a numeric prefix.
    """
    if value is None:
        return 0.0
    try:
        volume = float(value)
    except (TypeError, ValueError):
        return 0.0
    if volume != volume:  # NaN
        return 0.0
    return volume


def _to_float(value: Any) -> Optional[float]:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if result != result:
        return None
    return result


def resolve_probability(outcomes: List[Any], prices: List[Any]) -> Optional[float]:
    """
    Pick the "Yes" probability from index-aligned outcomes and prices.

    Uses the price at the first "yes" label (case-insensitive), else the
    first price. Returns 0.0 when there are no prices and None when the
    chosen price is not numeric.
    """
    if not prices:
        return 0.0

    index = 0
    if outcomes:
        for i, label in enumerate(outcomes):
            if isinstance(label, str) and label.lower() == "yes":
                index = i
                break

    if index >= len(prices):
        return None

    return _to_float(prices[index])


@dataclass(frozen=True)
class PredictionEvent:
    """
    Normalized prediction extracted from one market.

    Immutable once created by EventProcessor.
    """
    event: str
    prob: float
    category: str
    confidence: str  # fact | likely | uncertain
    source: str = SOURCE_POLYMARKET
    ticker: Optional[str] = None
    price_target: Optional[float] = None
    timeframe: Optional[str] = None
    signal: Optional[str] = None  # bullish | bearish | neutral

    def to_dict(self) -> dict:
        """Convert to the artifact's wire format (absent optionals omitted)."""
        data = {
            "event": self.event,
            "prob": self.prob,
            "category": self.category,
            "confidence": self.confidence,
            "source": self.source,
        }
        if self.ticker is not None:
            data["ticker"] = self.ticker
        if self.price_target is not None:
            data["priceTarget"] = self.price_target
        if self.timeframe is not None:
            data["timeframe"] = self.timeframe
        if self.signal is not None:
            data["signal"] = self.signal
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PredictionEvent":
        """Create from the artifact's wire format."""
        return cls(
            event=data["event"],
            prob=float(data["prob"]),
            category=data["category"],
            confidence=data["confidence"],
            source=data.get("source", SOURCE_POLYMARKET),
            ticker=data.get("ticker"),
            price_target=data.get("priceTarget"),
            timeframe=data.get("timeframe"),
            signal=data.get("signal"),
        )


@dataclass(frozen=True)
class SkipCounts:
    """Why records were dropped. Diagnostic only."""
    no_title: int = 0
    low_volume: int = 0
    no_year: int = 0  # also counts non-finance markets
    no_prices: int = 0
    invalid_prob: int = 0

    @property
    def total(self) -> int:
        return (
            self.no_title + self.low_volume + self.no_year +
            self.no_prices + self.invalid_prob
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "no_title": self.no_title,
            "low_volume": self.low_volume,
            "no_year": self.no_year,
            "no_prices": self.no_prices,
            "invalid_prob": self.invalid_prob,
        }


@dataclass(frozen=True)
class ProcessResult:
    """Accepted events plus skip diagnostics for one processing pass."""
    events: Tuple[PredictionEvent, ...] = field(default_factory=tuple)
    skipped: SkipCounts = field(default_factory=SkipCounts)

    def __len__(self) -> int:
        return len(self.events)


class EventProcessor:
    """
    Turn raw market records into PredictionEvents.

    Holds no state between calls; counters live in each call's result.
    """

    def __init__(self, min_volume: float = MIN_VOLUME):
        """
        Initialize event processor.

        Args:
            min_volume: Markets with lower traded volume are dropped
        """
        self.min_volume = min_volume

    def process(self, markets: Iterable[Dict[str, Any]]) -> ProcessResult:
        """
        Filter and normalize market records, preserving input order.

        Args:
            markets: Raw market dictionaries from the Gamma API

        Returns:
            ProcessResult with accepted events and skip counts
        """
        markets = list(markets)
        events: List[PredictionEvent] = []
        counts = {
            "no_title": 0,
            "low_volume": 0,
            "no_year": 0,
            "no_prices": 0,
            "invalid_prob": 0,
        }

        for market in markets:
            reason, event = self._process_one(market)
            if event is None:
                counts[reason] += 1
                continue
            events.append(event)

        skipped = SkipCounts(**counts)
        self._log_breakdown(markets, events, skipped)

        return ProcessResult(events=tuple(events), skipped=skipped)

    def _process_one(
        self,
        market: Optional[Dict[str, Any]]
    ) -> Tuple[Optional[str], Optional[PredictionEvent]]:
        """Run one record through the gates. Returns (skip_reason, event)."""
        if not isinstance(market, dict) or not market.get("question"):
            return "no_title", None

        question = market["question"]
        description = market.get("description") or ""

        if parse_volume(market.get("volume")) < self.min_volume:
            return "low_volume", None

        year = extract_year(question) or extract_year(description)
        if not year:
            return "no_year", None

        try:
            outcomes = resolve_outcome_field(normalize_outcome_field(market.get("outcomes")))
        except OutcomeParseError as e:
            logger.debug(f"Ignoring bad outcomes for market {market.get('id')}: {e}")
            outcomes = []

        try:
            prices = resolve_outcome_field(normalize_outcome_field(market.get("outcomePrices")))
        except OutcomeParseError as e:
            logger.debug(f"Bad outcome prices for market {market.get('id')}: {e}")
            return "invalid_prob", None

        prob = resolve_probability(outcomes, prices)
        if prob is None:
            return "invalid_prob", None

        if prob == 0:
            return "no_prices", None

        category = categorize_event(question, description)
        if category == OTHER_CATEGORY:
            return "no_year", None

        combined = f"{question} {description}"

        return None, PredictionEvent(
            event=question,
            prob=prob,
            category=category,
            confidence=get_confidence(prob),
            source=SOURCE_POLYMARKET,
            ticker=extract_ticker(combined),
            price_target=extract_price_target(combined),
            timeframe=str(year),
            signal=determine_signal(question, prob),
        )

    def _log_breakdown(
        self,
        markets: List[Dict[str, Any]],
        events: List[PredictionEvent],
        skipped: SkipCounts
    ) -> None:
        logger.info(
            f"Processed {len(markets)} markets: {len(events)} accepted, "
            f"{skipped.total} skipped"
        )
        logger.info(
            f"Filtering breakdown: no title={skipped.no_title}, "
            f"low volume (<${self.min_volume:,.0f})={skipped.low_volume}, "
            f"no year / non-finance={skipped.no_year}, "
            f"no prices={skipped.no_prices}, "
            f"invalid probability={skipped.invalid_prob}"
        )

        if markets and not events:
            sample = markets[0] or {}
            description = (sample.get("description") or "")[:100]
            logger.debug(
                f"Sample market: question={sample.get('question')!r}, "
                f"volume={parse_volume(sample.get('volume')):,.0f}, "
                f"prices={sample.get('outcomePrices')!r}, "
                f"description={description!r}"
            )


def process_markets(markets: Iterable[Dict[str, Any]]) -> ProcessResult:
    """Convenience function to process markets with default settings."""
    return EventProcessor().process(markets)
