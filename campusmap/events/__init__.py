"""
Campus events - a positional list of {name, description} records.
"""

from .log import EventLog
from .models import EventRecord

__all__ = ["EventLog", "EventRecord"]
