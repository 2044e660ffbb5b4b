"""Humane meeting-time matching engine.

Intersects participants' recurring weekly availability windows across
timezones, classifies candidates against busy intervals and explains which
participants block a full match.
"""

from humane_scheduling.engine import run_search, scan, summarize

__all__ = ["run_search", "scan", "summarize"]
