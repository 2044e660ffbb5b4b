"""Timezone rule resolution on top of the IANA tz database.

The engine never keeps its own offset tables: every conversion goes through
``zoneinfo`` at the instant being evaluated, so DST transitions are resolved
per occurrence.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from humane_scheduling.errors import TimezoneResolutionFailure

log = logging.getLogger("humane_scheduling.timezones")


@lru_cache(maxsize=512)
def _load_zone(tz_id: str) -> tzinfo:
    return ZoneInfo(tz_id)


class ZoneInfoResolver:
    """Resolve IANA timezone ids. Unknown ids are an error, never UTC."""

    def resolve(self, tz_id: str, participant_id: str = "") -> tzinfo:
        if not tz_id or not tz_id.strip():
            raise TimezoneResolutionFailure(tz_id, participant_id)
        try:
            return _load_zone(tz_id.strip())
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise TimezoneResolutionFailure(tz_id, participant_id) from exc

    def to_local(self, tz_id: str, instant: datetime) -> datetime:
        """Wall-clock time in ``tz_id`` at the UTC ``instant``."""
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(self.resolve(tz_id))

    def utc_offset_hours(self, tz_id: str, instant: datetime) -> float:
        offset = self.to_local(tz_id, instant).utcoffset()
        return offset.total_seconds() / 3600 if offset else 0.0


default_resolver = ZoneInfoResolver()
