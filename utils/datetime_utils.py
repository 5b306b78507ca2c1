"""
Datetime helpers for API responses and run reports.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current UTC time as a naive datetime.

    Naive values serialize without an offset, matching the timestamps the
    API and CLI report.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
