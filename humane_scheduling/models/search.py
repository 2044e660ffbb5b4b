"""Pydantic models for search requests and their classified results."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from humane_scheduling.config import settings
from humane_scheduling.models.availability import Participant
from humane_scheduling.models.busy import BusyInterval


class SearchRequest(BaseModel):
    """Everything one engine invocation needs.

    Only the structure is checked here; semantic problems (negative
    durations, inverted ranges, ...) are reported by
    ``humane_scheduling.engine.validation`` so callers get them back as data.

    Stored roster records should be turned into participants by
    ``humane_scheduling.loader.parse_request`` (or ``Participant.from_record``),
    which drop a malformed window and report it. Passing raw dicts straight
    to this model validates windows strictly, so one bad window rejects the
    whole request.
    """

    participants: list[Participant] = []
    busy_intervals: list[BusyInterval] = []
    range_start: date
    range_end: date
    duration_minutes: int
    step_minutes: int = Field(default_factory=lambda: settings.default_step_minutes)
    scan_timezone: str = Field(default_factory=lambda: settings.scan_timezone)


class UnavailableParticipant(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    reason: str = "busy"


class CandidateSlot(BaseModel):
    """A pattern-valid slot and who can attend it."""

    model_config = ConfigDict(frozen=True)

    start_utc: datetime
    end_utc: datetime
    is_full_match: bool
    available_participant_ids: tuple[str, ...] = ()
    unavailable_participants: tuple[UnavailableParticipant, ...] = ()

    @model_validator(mode="after")
    def _check_partition(self) -> "CandidateSlot":
        if self.is_full_match != (not self.unavailable_participants):
            raise ValueError("is_full_match must be true iff nobody is unavailable")
        if set(self.available_participant_ids) & set(self.unavailable_ids):
            raise ValueError("a participant cannot be both available and unavailable")
        return self

    @property
    def unavailable_ids(self) -> tuple[str, ...]:
        return tuple(p.id for p in self.unavailable_participants)

    @property
    def available_count(self) -> int:
        return len(self.available_participant_ids)


class BlockerEntry(BaseModel):
    id: str
    blocked_count: int
    blocked_fraction: float

    @computed_field
    @property
    def percentage(self) -> int:
        return round(self.blocked_fraction * 100)


class BlockerSummary(BaseModel):
    """Advisory view over one search's slots; never reorders them."""

    per_participant: list[BlockerEntry] = []
    best_partial_slot: Optional[CandidateSlot] = None

    @property
    def top_blocker(self) -> Optional[BlockerEntry]:
        if not self.per_participant or self.per_participant[0].blocked_count == 0:
            return None
        return self.per_participant[0]


class Suggestion(BaseModel):
    type: Literal["no_candidates", "top_blocker", "timezone_spread"]
    message: str
    participant_id: Optional[str] = None


class SchedulingAnalysis(BaseModel):
    has_full_matches: bool
    full_match_count: int
    partial_match_count: int
    blockers: Optional[BlockerSummary] = None
    suggestions: list[Suggestion] = []


class DataQualityIssue(BaseModel):
    kind: Literal["malformed_availability", "timezone_resolution_failure"]
    participant_id: str
    detail: str


class ScanStats(BaseModel):
    slots_checked: int = 0
    rejected_by_pattern: int = 0
    partial_matches: int = 0
    full_matches: int = 0
    # Participants with no synced busy data; they are treated as free.
    never_synced: list[str] = []


class ValidationProblem(BaseModel):
    field: str
    message: str


class SearchOutcome(BaseModel):
    """What ``run_search`` hands back to UI and messaging callers."""

    ok: bool
    problems: list[ValidationProblem] = []
    slots: list[CandidateSlot] = []
    stats: ScanStats = Field(default_factory=ScanStats)
    issues: list[DataQualityIssue] = []
    summary: Optional[BlockerSummary] = None
    analysis: Optional[SchedulingAnalysis] = None

    @property
    def full_matches(self) -> list[CandidateSlot]:
        return [s for s in self.slots if s.is_full_match]

    @property
    def partial_matches(self) -> list[CandidateSlot]:
        return [s for s in self.slots if not s.is_full_match]
