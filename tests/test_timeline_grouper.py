"""
Tests for Timeline Grouper
"""

from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from pipeline.event_processor import EventProcessor, PredictionEvent
from pipeline.timeline_grouper import TimelineGrouper, group_by_year, sorted_years


def _event(text: str, prob: float, timeframe: str = None) -> PredictionEvent:
    return PredictionEvent(
        event=text,
        prob=prob,
        category="Crypto",
        confidence="uncertain",
        timeframe=timeframe
    )


class TestTimelineGrouper:
    """Tests for year bucketing and ordering."""

    def test_sorted_descending(self):
        low = _event("Will BTC hit $200k in 2026?", 0.3)
        high = _event("Will ETH hit $10k in 2026?", 0.9)

        timeline = TimelineGrouper().group([low, high])

        assert list(timeline.keys()) == ["2026"]
        assert [e.prob for e in timeline["2026"]] == [0.9, 0.3]

    def test_stable_for_equal_probabilities(self):
        first = _event("First: Will BTC hit $200k in 2026?", 0.5)
        second = _event("Second: Will ETH hit $10k in 2026?", 0.5)
        top = _event("Will SOL hit $500 in 2026?", 0.7)

        timeline = group_by_year([first, top, second])

        assert timeline["2026"] == [top, first, second]

    def test_multiple_years(self):
        events = [
            _event("Fed cuts by 2027?", 0.4),
            _event("Gold above $3,000 in 2026?", 0.6),
            _event("Recession in Q2 2028?", 0.2),
        ]

        timeline = group_by_year(events)

        assert sorted_years(timeline) == ["2026", "2027", "2028"]
        assert all(len(v) == 1 for v in timeline.values())

    def test_year_reextracted_from_text(self):
        """The bucket comes from the event text, not the timeframe field."""
        event = _event("Will BTC hit $200k by 2029?", 0.5, timeframe="2026")

        timeline = group_by_year([event])

        assert list(timeline.keys()) == ["2029"]

    def test_event_without_year_in_text_dropped(self):
        """A year that only came from the description does not survive grouping."""
        event = _event("Will BTC hit $200k?", 0.5, timeframe="2026")

        assert group_by_year([event]) == {}

    def test_empty(self):
        assert group_by_year([]) == {}

    def test_processor_output_round_trip(self, sample_markets):
        """Events accepted on question-text years keep their year."""
        result = EventProcessor().process(sample_markets)

        timeline = TimelineGrouper().group(result.events)

        assert sum(len(v) for v in timeline.values()) == len(result.events)
        for year, events in timeline.items():
            assert all(e.timeframe == year for e in events)
        assert [e.prob for e in timeline["2026"]] == [0.82, 0.35]
