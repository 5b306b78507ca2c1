"""
JSON utilities for writing pipeline artifacts.
"""

import json
from datetime import datetime
from typing import Any, Dict, Iterable


class TimelineJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles pipeline dataclasses and datetimes."""

    def default(self, obj: Any) -> Any:
        # PredictionEvent, SkipCounts, ...
        to_dict = getattr(obj, "to_dict", None)
        if callable(to_dict):
            return to_dict()

        if isinstance(obj, datetime):
            return obj.isoformat()

        return super().default(obj)


def timeline_to_dict(timeline: Dict[str, Iterable[Any]]) -> Dict[str, list]:
    """Convert a year -> events timeline into plain JSON-ready data."""
    return {
        year: [e.to_dict() if hasattr(e, "to_dict") else e for e in events]
        for year, events in timeline.items()
    }


def dump_json(obj: Any, fp, **kwargs) -> None:
    """Wrapper for json.dump that uses TimelineJSONEncoder by default."""
    kwargs.setdefault('cls', TimelineJSONEncoder)
    kwargs.setdefault('indent', 2)
    kwargs.setdefault('ensure_ascii', False)
    json.dump(obj, fp, **kwargs)


def dumps_json(obj: Any, **kwargs) -> str:
    """Wrapper for json.dumps that uses TimelineJSONEncoder by default."""
    kwargs.setdefault('cls', TimelineJSONEncoder)
    kwargs.setdefault('indent', 2)
    kwargs.setdefault('ensure_ascii', False)
    return json.dumps(obj, **kwargs)
