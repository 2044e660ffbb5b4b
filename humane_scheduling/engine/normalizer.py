"""Is a UTC slot humane for a participant?

Converts the candidate's UTC bounds to the participant's wall clock at that
instant and checks them against the declared windows. Windows are
OR-combined (availability is the union of what was declared); the
per-participant results are AND-combined by the scanner.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Iterable, NamedTuple, Optional

from humane_scheduling.errors import TimezoneResolutionFailure
from humane_scheduling.models.availability import AvailabilityWindow, Participant
from humane_scheduling.timezones import ZoneInfoResolver, default_resolver

log = logging.getLogger("humane_scheduling.engine.normalizer")


class LocalSpan(NamedTuple):
    """A slot expressed on the local wall clock of its start date."""

    weekday: int        # date.weekday(): Monday=0 ... Sunday=6
    start_hour: float
    end_hour: float     # measured from the start date's midnight; may exceed 24


def _hours(moment: datetime) -> float:
    return moment.hour + moment.minute / 60 + moment.second / 3600


def local_span(start_utc: datetime, end_utc: datetime, zone: tzinfo) -> LocalSpan:
    local_start = start_utc.astimezone(zone)
    local_end = end_utc.astimezone(zone)
    days_later = (local_end.date() - local_start.date()).days
    return LocalSpan(
        weekday=local_start.weekday(),
        start_hour=_hours(local_start),
        end_hour=days_later * 24 + _hours(local_end),
    )


def fits_any_window(span: LocalSpan, windows: Iterable[AvailabilityWindow]) -> bool:
    """Union semantics: one matching window is enough."""
    return any(w.contains(span.weekday, span.start_hour, span.end_hour) for w in windows)


class TimeWindowNormalizer:
    """Decides pattern compatibility of ``[start_utc, end_utc)`` per participant."""

    def __init__(self, resolver: Optional[ZoneInfoResolver] = None) -> None:
        self.resolver = resolver or default_resolver

    def zone_for(self, participant: Participant) -> tzinfo:
        """Resolve the participant's tz rules; raises TimezoneResolutionFailure."""
        return self.resolver.resolve(participant.timezone, participant.id)

    def fits(
        self,
        start_utc: datetime,
        end_utc: datetime,
        participant: Participant,
        zone: tzinfo,
    ) -> bool:
        return fits_any_window(local_span(start_utc, end_utc, zone), participant.windows)

    def is_compatible(
        self,
        start_utc: datetime,
        end_utc: datetime,
        participant: Participant,
    ) -> bool:
        """True iff the whole slot lies inside any of the participant's windows.

        An unresolvable timezone fails closed (False) rather than being read
        as UTC.
        """
        try:
            zone = self.zone_for(participant)
        except TimezoneResolutionFailure as exc:
            log.debug("Not compatible: %s", exc)
            return False
        return self.fits(start_utc, end_utc, participant, zone)


def is_compatible(start_utc: datetime, end_utc: datetime, participant: Participant) -> bool:
    return TimeWindowNormalizer().is_compatible(start_utc, end_utc, participant)
