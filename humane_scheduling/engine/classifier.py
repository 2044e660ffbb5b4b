"""Splits pattern-valid slots into full and partial matches."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from humane_scheduling.engine.busy_index import BusyIntervalIndex
from humane_scheduling.models.availability import Participant
from humane_scheduling.models.search import CandidateSlot, UnavailableParticipant

REASON_BUSY = "busy"


def classify(
    start_utc: datetime,
    end_utc: datetime,
    participants: Sequence[Participant],
    busy_index: BusyIntervalIndex,
) -> CandidateSlot:
    """Classify every participant exactly once for ``[start_utc, end_utc)``.

    Busy is the only disqualifying reason at this stage; declared
    availability was already enforced for everyone by the scanner.
    """
    available: list[str] = []
    unavailable: list[UnavailableParticipant] = []
    for participant in participants:
        if busy_index.is_busy(start_utc, end_utc, participant.id):
            unavailable.append(UnavailableParticipant(id=participant.id, reason=REASON_BUSY))
        else:
            available.append(participant.id)

    return CandidateSlot(
        start_utc=start_utc,
        end_utc=end_utc,
        is_full_match=not unavailable,
        available_participant_ids=tuple(available),
        unavailable_participants=tuple(unavailable),
    )
