"""Brute-force walk of the search range.

Steps a cursor across the range at ``step_minutes`` granularity and keeps
only slots that are humane for every participant. Those are handed to the
classifier; everything else is discarded outright, so partial matching only
ever relaxes the busy constraint, never the declared-availability one.

Cost is ``O(range / step * participants)``; ranges are days to weeks and
rosters are small, so predictability wins over cleverness here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from humane_scheduling.engine.busy_index import BusyIntervalIndex
from humane_scheduling.engine.classifier import classify
from humane_scheduling.engine.normalizer import TimeWindowNormalizer
from humane_scheduling.engine.validation import ensure_valid
from humane_scheduling.errors import TimezoneResolutionFailure
from humane_scheduling.models.availability import Participant
from humane_scheduling.models.search import (
    CandidateSlot,
    DataQualityIssue,
    ScanStats,
    SearchRequest,
)

log = logging.getLogger("humane_scheduling.engine.scanner")


@dataclass
class ScanResult:
    """Slots in ascending ``start_utc`` order plus what was learned on the way."""

    slots: list[CandidateSlot] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)
    issues: list[DataQualityIssue] = field(default_factory=list)
    range_start_utc: Optional[datetime] = None
    range_end_utc: Optional[datetime] = None


def scan_bounds(request: SearchRequest, zone: tzinfo) -> tuple[datetime, datetime]:
    """Midnight of ``range_start`` to the midnight ending ``range_end``, as UTC."""
    start_local = datetime.combine(request.range_start, time.min, tzinfo=zone)
    end_local = datetime.combine(request.range_end + timedelta(days=1), time.min, tzinfo=zone)
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)


def _resolve_roster(
    participants: list[Participant],
    normalizer: TimeWindowNormalizer,
    issues: list[DataQualityIssue],
) -> list[tuple[Participant, Optional[tzinfo]]]:
    resolved: list[tuple[Participant, Optional[tzinfo]]] = []
    for participant in participants:
        for detail in participant.rejected_windows:
            issues.append(DataQualityIssue(
                kind="malformed_availability",
                participant_id=participant.id,
                detail=detail,
            ))
        try:
            zone: Optional[tzinfo] = normalizer.zone_for(participant)
        except TimezoneResolutionFailure as exc:
            log.warning("%s; participant can never match", exc)
            issues.append(DataQualityIssue(
                kind="timezone_resolution_failure",
                participant_id=participant.id,
                detail=str(exc),
            ))
            zone = None
        resolved.append((participant, zone))
    return resolved


def scan_with_diagnostics(
    request: SearchRequest,
    normalizer: Optional[TimeWindowNormalizer] = None,
) -> ScanResult:
    """Validate, scan and classify. Raises InvalidRequest on a bad request."""
    normalizer = normalizer or TimeWindowNormalizer()
    ensure_valid(request, normalizer.resolver)

    result = ScanResult()
    roster = _resolve_roster(request.participants, normalizer, result.issues)
    busy_index = BusyIntervalIndex.build(request.busy_intervals)
    result.stats.never_synced = [p.id for p in request.participants if not busy_index.has_data(p.id)]

    scan_zone = normalizer.resolver.resolve(request.scan_timezone)
    range_start, range_end = scan_bounds(request, scan_zone)
    result.range_start_utc, result.range_end_utc = range_start, range_end

    duration = timedelta(minutes=request.duration_minutes)
    step = timedelta(minutes=request.step_minutes)
    participants = request.participants
    stats = result.stats

    log.info(
        "Scanning %s..%s (%s) for %d-minute slots across %d participants, %d busy intervals",
        request.range_start, request.range_end, request.scan_timezone,
        request.duration_minutes, len(participants), len(request.busy_intervals),
    )

    # Cursor arithmetic is on absolute UTC instants so DST days in the scan
    # calendar still step evenly.
    cursor = range_start
    while cursor + duration <= range_end:
        slot_end = cursor + duration
        stats.slots_checked += 1

        humane = all(
            zone is not None and normalizer.fits(cursor, slot_end, participant, zone)
            for participant, zone in roster
        )
        if not humane:
            stats.rejected_by_pattern += 1
        else:
            slot = classify(cursor, slot_end, participants, busy_index)
            if slot.is_full_match:
                stats.full_matches += 1
            else:
                stats.partial_matches += 1
                log.debug("Partial match at %s: busy %s", cursor.isoformat(), slot.unavailable_ids)
            result.slots.append(slot)

        cursor += step

    log.info(
        "Scan done: %d checked, %d not humane, %d partial, %d full",
        stats.slots_checked, stats.rejected_by_pattern,
        stats.partial_matches, stats.full_matches,
    )
    return result


def scan(
    request: SearchRequest,
    normalizer: Optional[TimeWindowNormalizer] = None,
) -> list[CandidateSlot]:
    """Classified pattern-valid candidates in ascending ``start_utc`` order."""
    return scan_with_diagnostics(request, normalizer).slots
