"""Blocker and fairness analysis over one search's candidate list.

Advisory only: nothing here filters or reorders the slots it is given.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from humane_scheduling.config import settings
from humane_scheduling.errors import TimezoneResolutionFailure
from humane_scheduling.models.availability import Participant
from humane_scheduling.models.search import (
    BlockerEntry,
    BlockerSummary,
    CandidateSlot,
    SchedulingAnalysis,
    Suggestion,
)
from humane_scheduling.timezones import ZoneInfoResolver, default_resolver

log = logging.getLogger("humane_scheduling.engine.analyzer")


def summarize(slots: Sequence[CandidateSlot], participants: Sequence[Participant]) -> BlockerSummary:
    """Rank participants by how often they are the reason a slot is partial.

    ``blocked_fraction`` is relative to all pattern-valid candidates. Ties
    keep roster order. ``best_partial_slot`` maximises attendance, earliest
    start first among equals.
    """
    total = len(slots)
    counts = {p.id: 0 for p in participants}
    for slot in slots:
        for participant_id in slot.unavailable_ids:
            if participant_id in counts:
                counts[participant_id] += 1

    entries = [
        BlockerEntry(
            id=participant_id,
            blocked_count=count,
            blocked_fraction=count / total if total else 0.0,
        )
        for participant_id, count in counts.items()
    ]
    entries.sort(key=lambda e: e.blocked_fraction, reverse=True)

    partials = [s for s in slots if not s.is_full_match]
    best = min(partials, key=lambda s: (-s.available_count, s.start_utc), default=None)

    return BlockerSummary(per_participant=entries, best_partial_slot=best)


def timezone_spread_hours(
    participants: Sequence[Participant],
    at: datetime,
    resolver: Optional[ZoneInfoResolver] = None,
) -> float:
    """Distance in hours between the roster's most eastern and western offsets."""
    resolver = resolver or default_resolver
    offsets = []
    for participant in participants:
        try:
            offsets.append(resolver.utc_offset_hours(participant.timezone, at))
        except TimezoneResolutionFailure:
            continue
    if len(offsets) < 2:
        return 0.0
    return max(offsets) - min(offsets)


def analyze(
    slots: Sequence[CandidateSlot],
    participants: Sequence[Participant],
    reference: Optional[datetime] = None,
    resolver: Optional[ZoneInfoResolver] = None,
) -> SchedulingAnalysis:
    """Counts plus, when nobody-is-busy slots are missing, blockers and hints.

    ``reference`` is the instant used to compare UTC offsets; it defaults to
    the first slot's start, or now.
    """
    full = sum(1 for s in slots if s.is_full_match)
    analysis = SchedulingAnalysis(
        has_full_matches=full > 0,
        full_match_count=full,
        partial_match_count=len(slots) - full,
    )
    if full:
        return analysis

    if not slots:
        analysis.suggestions.append(Suggestion(
            type="no_candidates",
            message=(
                "No time fits everyone's declared hours. Try a longer date "
                "range, a shorter meeting, or wider availability windows."
            ),
        ))
    else:
        analysis.blockers = summarize(slots, participants)
        top = analysis.blockers.top_blocker
        if top is not None:
            analysis.suggestions.append(Suggestion(
                type="top_blocker",
                participant_id=top.id,
                message=f"{top.id} is unavailable for {top.percentage}% of potential times.",
            ))

    at = reference or (slots[0].start_utc if slots else datetime.now(tz=timezone.utc))
    spread = timezone_spread_hours(participants, at, resolver)
    if spread >= settings.timezone_spread_hours:
        analysis.suggestions.append(Suggestion(
            type="timezone_spread",
            message=(
                f"The group spans {spread:g} hours of timezones. Evening times "
                "in the middle timezone often create the best overlap."
            ),
        ))

    log.info(
        "Analysis: %d full, %d partial, %d suggestion(s)",
        analysis.full_match_count, analysis.partial_match_count, len(analysis.suggestions),
    )
    return analysis


def group_by_day(
    slots: Sequence[CandidateSlot],
    tz_id: str = "UTC",
    resolver: Optional[ZoneInfoResolver] = None,
) -> dict[date, list[CandidateSlot]]:
    """Bucket slots by local calendar date in ``tz_id``, preserving order."""
    resolver = resolver or default_resolver
    zone = resolver.resolve(tz_id)
    days: dict[date, list[CandidateSlot]] = {}
    for slot in slots:
        days.setdefault(slot.start_utc.astimezone(zone).date(), []).append(slot)
    return days
