"""Exception taxonomy for the matching engine.

Only ``InvalidRequest`` ever stops a search. The other two are raised at
the seams where a single participant's data is read and are caught there,
so one bad record degrades that participant instead of the whole group.
"""

from __future__ import annotations


class SchedulingError(Exception):
    """Base class for engine errors."""


class InvalidRequest(SchedulingError):
    """The search request failed validation before scanning began."""

    def __init__(self, problems: list) -> None:
        self.problems = list(problems)
        detail = "; ".join(f"{p.field}: {p.message}" for p in self.problems)
        super().__init__(f"Invalid search request: {detail}")


class TimezoneResolutionFailure(SchedulingError):
    """A timezone id could not be resolved to tz rules."""

    def __init__(self, timezone: str, participant_id: str = "") -> None:
        self.timezone = timezone
        self.participant_id = participant_id
        who = f" for {participant_id}" if participant_id else ""
        super().__init__(f"Unknown timezone {timezone!r}{who}")


class MalformedAvailability(SchedulingError):
    """An availability window record could not be validated."""

    def __init__(self, participant_id: str, detail: str) -> None:
        self.participant_id = participant_id
        self.detail = detail
        super().__init__(f"Malformed availability for {participant_id}: {detail}")
