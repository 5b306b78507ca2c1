"""
Utility modules for the Market Oracle.
"""

from .datetime_utils import utc_now
from .json_utils import TimelineJSONEncoder, dump_json, dumps_json, timeline_to_dict

__all__ = ["utc_now", "TimelineJSONEncoder", "dump_json", "dumps_json", "timeline_to_dict"]
