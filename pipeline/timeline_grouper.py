"""
Timeline Grouper

Buckets PredictionEvents by year and orders each bucket by probability.
"""

import logging
from typing import Dict, Iterable, List

from pipeline.event_processor import PredictionEvent
from pipeline.text_extractor import extract_year

logger = logging.getLogger(__name__)


TimelineData = Dict[str, List[PredictionEvent]]


class TimelineGrouper:
    """
    Group prediction events into a year -> events timeline.

    The year is re-extracted from each event's question text rather than
    read from `timeframe`; events whose text yields no year are dropped.
    """

    def group(self, events: Iterable[PredictionEvent]) -> TimelineData:
        """
        Build the timeline.

        Args:
            events: Normalized prediction events

        Returns:
            Dict mapping year string to events sorted by descending
            probability (ties keep input order)
        """
        timeline: TimelineData = {}
        dropped = 0

        for event in events:
            year = extract_year(event.event)
            if not year:
                dropped += 1
                continue
            timeline.setdefault(str(year), []).append(event)

        for year_key in timeline:
            # sorted() is stable
            timeline[year_key] = sorted(
                timeline[year_key], key=lambda e: e.prob, reverse=True
            )

        if dropped:
            logger.warning(f"Dropped {dropped} events with no year in question text")

        logger.info(f"Generated timeline for years: {', '.join(sorted_years(timeline))}")
        return timeline


def sorted_years(timeline: TimelineData) -> List[str]:
    """Year keys in ascending order."""
    return sorted(timeline.keys())


def group_by_year(events: Iterable[PredictionEvent]) -> TimelineData:
    """Convenience function to group events with a default grouper."""
    return TimelineGrouper().group(events)
