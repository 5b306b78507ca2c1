"""
CLI Command Handlers

Implementation of CLI commands for the pipeline.
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pipeline.event_processor import EventProcessor, PredictionEvent, ProcessResult
from pipeline.timeline_grouper import TimelineData, TimelineGrouper, sorted_years
from integrations.polymarket_client import FetchResult, PolymarketClient, get_polymarket_client
from utils.json_utils import dump_json, timeline_to_dict

logger = logging.getLogger(__name__)


DEFAULT_OUTPUT = "predictions.json"


@dataclass
class TimelineRun:
    """Everything one pipeline run produced, for reporting."""
    timeline: TimelineData
    fetch: FetchResult
    processed: ProcessResult = field(default_factory=ProcessResult)

    @property
    def event_count(self) -> int:
        return sum(len(events) for events in self.timeline.values())

    def summary(self) -> Dict[str, Any]:
        return {
            "markets_fetched": len(self.fetch.markets),
            "fetch_stopped_reason": self.fetch.stopped_reason,
            "predictions": len(self.processed.events),
            "timeline_events": self.event_count,
            "years": sorted_years(self.timeline),
            "skipped": self.processed.skipped.to_dict(),
        }


class PipelineOrchestrator:
    """
    Orchestrates the full pipeline execution.

    Pipeline stages:
    1. Fetch active markets from Polymarket (paginated, retrying)
    2. Filter and normalize into PredictionEvents
    3. Group by year, ordered by probability
    """

    def __init__(
        self,
        client: Optional[PolymarketClient] = None,
        processor: Optional[EventProcessor] = None,
        grouper: Optional[TimelineGrouper] = None
    ):
        """Initialize orchestrator with pipeline components."""
        self.client = client or get_polymarket_client()
        self.processor = processor or EventProcessor()
        self.grouper = grouper or TimelineGrouper()

    def build_timeline(self, max_markets: int = 1000) -> TimelineRun:
        """
        Run fetch → process → group once.

        Args:
            max_markets: Maximum number of markets to fetch

        Returns:
            TimelineRun with the timeline and per-stage results
        """
        logger.info("Fetching prediction market data...")
        fetch = self.client.fetch_markets(max_records=max_markets)
        logger.info(f"Fetched {len(fetch.markets)} Polymarket markets")
        if not fetch.complete:
            logger.warning(f"Fetch ended early ({fetch.stopped_reason}); timeline is partial")

        processed = self.processor.process(fetch.markets)
        logger.info(f"Processed {len(processed.events)} Polymarket predictions")

        timeline = self.grouper.group(processed.events)

        return TimelineRun(timeline=timeline, fetch=fetch, processed=processed)

    def get_future_timeline(self, max_markets: int = 1000) -> TimelineData:
        """Run the pipeline and return only the year -> events mapping."""
        return self.build_timeline(max_markets).timeline


def write_timeline(timeline: TimelineData, output_path: str) -> Path:
    """Write a timeline artifact as JSON."""
    path = Path(output_path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        dump_json(timeline_to_dict(timeline), f)
    return path


def load_timeline(input_path: str) -> TimelineData:
    """Load a timeline artifact written by write_timeline."""
    with open(input_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Timeline artifact must be a JSON object: {input_path}")

    return {
        str(year): [PredictionEvent.from_dict(e) for e in events]
        for year, events in data.items()
    }


def generate_predictions_file(
    output_path: str = DEFAULT_OUTPUT,
    max_markets: int = 1000,
    orchestrator: Optional[PipelineOrchestrator] = None,
    verbose: bool = True
) -> TimelineRun:
    """
    Build the timeline and write it to disk.

    Args:
        output_path: Where to write predictions.json
        max_markets: Maximum number of markets to fetch
        orchestrator: Optional pre-built orchestrator
        verbose: Print progress messages

    Returns:
        The TimelineRun that was written
    """
    orchestrator = orchestrator or PipelineOrchestrator()
    run = orchestrator.build_timeline(max_markets=max_markets)

    path = write_timeline(run.timeline, output_path)
    logger.info(f"Generated {path} with {run.event_count} events")

    if verbose:
        _print_run_summary(run)
        print(f"\nGenerated {path}")

    return run


def fetch_raw_markets(
    max_markets: int = 1000,
    output_path: Optional[str] = None,
    client: Optional[PolymarketClient] = None,
    verbose: bool = True
) -> FetchResult:
    """Fetch raw markets only, optionally saving them."""
    client = client or get_polymarket_client()
    result = client.fetch_markets(max_records=max_markets)

    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            dump_json(result.markets, f)
        logger.info(f"Saved {len(result.markets)} raw markets to {output_path}")

    if verbose:
        print(f"Fetched {len(result.markets)} markets in {result.pages_fetched} pages")
        if result.stopped_reason:
            print(f"Stopped: {result.stopped_reason}")

    return result


def show_timeline(input_path: str = DEFAULT_OUTPUT, verbose: bool = True) -> TimelineData:
    """Print a summary of a saved timeline artifact."""
    logger.info(f"Loading timeline from: {input_path}")
    timeline = load_timeline(input_path)

    if verbose:
        if not timeline:
            print("No predictions in timeline")
        for year in sorted_years(timeline):
            events = timeline[year]
            print(f"\n{year} ({len(events)} events)")
            print(f"{'='*60}")
            for event in events[:5]:
                extras = " ".join(
                    part for part in (
                        f"[{event.ticker}]" if event.ticker else "",
                        f"${event.price_target:,.0f}" if event.price_target is not None else "",
                        event.signal or ""
                    ) if part
                )
                print(f"  {event.prob:>6.1%}  {event.category:<12} {event.event[:60]}")
                if extras:
                    print(f"          {extras}")

    return timeline


def _print_run_summary(run: TimelineRun) -> None:
    """Print pipeline run summary to console."""
    summary = run.summary()
    skipped = summary["skipped"]

    print(f"\n  RESULTS:")
    print(f"  {'─'*50}")
    print(f"  Markets fetched:       {summary['markets_fetched']}")
    if summary["fetch_stopped_reason"]:
        print(f"  Fetch stopped:         {summary['fetch_stopped_reason']}")
    print(f"  Predictions:           {summary['predictions']}")
    print(f"  Years:                 {', '.join(summary['years']) or '-'}")

    print(f"\n  Filtering breakdown:")
    print(f"    No title:              {skipped['no_title']}")
    print(f"    Low volume (<$5k):     {skipped['low_volume']}")
    print(f"    No year / non-finance: {skipped['no_year']}")
    print(f"    No prices:             {skipped['no_prices']}")
    print(f"    Invalid probability:   {skipped['invalid_prob']}")


def summarize_timeline(timeline: TimelineData) -> List[Dict[str, Any]]:
    """Per-year counts and top event, ascending by year."""
    rows = []
    for year in sorted_years(timeline):
        events = timeline[year]
        rows.append({
            "year": year,
            "count": len(events),
            "top_event": events[0].event if events else None,
            "top_prob": events[0].prob if events else None,
        })
    return rows
