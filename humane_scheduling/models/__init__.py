"""Data models for the matching engine."""

from .availability import AvailabilityWindow, DayClass, Participant, fallback_window
from .busy import BusyInterval
from .search import (
    BlockerEntry,
    BlockerSummary,
    CandidateSlot,
    DataQualityIssue,
    ScanStats,
    SchedulingAnalysis,
    SearchOutcome,
    SearchRequest,
    Suggestion,
    UnavailableParticipant,
    ValidationProblem,
)

__all__ = [
    "AvailabilityWindow",
    "BlockerEntry",
    "BlockerSummary",
    "BusyInterval",
    "CandidateSlot",
    "DataQualityIssue",
    "DayClass",
    "Participant",
    "ScanStats",
    "SchedulingAnalysis",
    "SearchOutcome",
    "SearchRequest",
    "Suggestion",
    "UnavailableParticipant",
    "ValidationProblem",
    "fallback_window",
]
