"""Pydantic models for participants and their recurring humane windows."""

from __future__ import annotations

import enum
import logging
import re
from typing import Any, Mapping

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from humane_scheduling.config import settings
from humane_scheduling.errors import MalformedAvailability

log = logging.getLogger("humane_scheduling.models.availability")

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


class DayClass(str, enum.Enum):
    """Which days of the local week a window applies to."""

    WEEKDAY = "weekday"            # Mon–Fri
    WEEKEND = "weekend"            # Sat–Sun
    ME_WORKDAY = "me_workday"      # Sun–Thu
    ME_WEEKEND = "me_weekend"      # Fri–Sat
    EVERYDAY = "everyday"

    def includes(self, weekday: int) -> bool:
        """``weekday`` follows ``date.weekday()``: Monday is 0, Sunday is 6."""
        weekend = weekday in (5, 6)
        me_weekend = weekday in (4, 5)
        if self is DayClass.WEEKDAY:
            return not weekend
        if self is DayClass.WEEKEND:
            return weekend
        if self is DayClass.ME_WORKDAY:
            return not me_weekend
        if self is DayClass.ME_WEEKEND:
            return me_weekend
        return True


def hhmm_to_hours(value: str) -> float:
    """Parse ``HH:MM`` into fractional hours (``"09:30"`` -> 9.5)."""
    match = _HHMM.match(value.strip())
    if not match:
        raise ValueError(f"expected HH:MM, got {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"time out of range: {value!r}")
    return hours + minutes / 60


class AvailabilityWindow(BaseModel):
    """One recurring rule, in the owner's local wall-clock time."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str
    day_class: DayClass = Field(
        default=DayClass.EVERYDAY,
        validation_alias=AliasChoices("day_class", "type"),
    )

    @field_validator("start", "end")
    @classmethod
    def _check_hhmm(cls, value: str) -> str:
        hhmm_to_hours(value)
        return value.strip()

    @model_validator(mode="after")
    def _check_order(self) -> "AvailabilityWindow":
        if self.start_hours >= self.end_hours:
            raise ValueError(
                f"window must start before it ends ({self.start}-{self.end}); "
                "overnight windows need two entries"
            )
        return self

    @property
    def start_hours(self) -> float:
        return hhmm_to_hours(self.start)

    @property
    def end_hours(self) -> float:
        return hhmm_to_hours(self.end)

    def contains(self, weekday: int, start_hour: float, end_hour: float) -> bool:
        """True if a local ``[start_hour, end_hour]`` span on ``weekday`` fits."""
        if not self.day_class.includes(weekday):
            return False
        return start_hour >= self.start_hours and end_hour <= self.end_hours


def fallback_window(start: str | None = None, end: str | None = None) -> AvailabilityWindow:
    """The window assumed for participants who never declared one."""
    return AvailabilityWindow(
        start=start or settings.fallback_window_start,
        end=end or settings.fallback_window_end,
        day_class=settings.fallback_window_day_class,
    )


def _describe(exc: ValidationError) -> str:
    return "; ".join(err["msg"] for err in exc.errors())


def parse_window(participant_id: str, raw: Any) -> AvailabilityWindow:
    """Validate one stored window record, raising MalformedAvailability."""
    if isinstance(raw, AvailabilityWindow):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedAvailability(participant_id, f"not a window record: {raw!r}")
    try:
        return AvailabilityWindow.model_validate(dict(raw))
    except ValidationError as exc:
        raise MalformedAvailability(participant_id, _describe(exc)) from exc


class Participant(BaseModel):
    """A roster member as seen by one engine invocation.

    ``windows`` are OR-combined: a slot is humane for the participant if it
    fits inside *any* of them. ``rejected_windows`` holds the reasons for
    declared windows that failed validation; they never match.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    timezone: str = ""
    windows: tuple[AvailabilityWindow, ...] = ()
    rejected_windows: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _apply_fallback(cls, data: Any) -> Any:
        # Nothing declared at all: substitute the configured default window.
        # Declared-but-invalid windows stay empty and fail closed.
        if isinstance(data, dict) and not data.get("windows") and not data.get("rejected_windows"):
            data = {**data, "windows": (fallback_window(),)}
        return data

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Participant":
        """Build a participant from a stored roster record.

        Accepts ``id`` or ``email`` as the key and ``windows`` or
        ``humane_windows`` for the window list. Invalid windows are dropped
        and reported instead of failing the whole record.
        """
        participant_id = str(record.get("id") or record.get("email") or "")
        raw_windows = record.get("windows")
        if raw_windows is None:
            raw_windows = record.get("humane_windows")

        windows: list[AvailabilityWindow] = []
        rejected: list[str] = []

        if not raw_windows:
            legacy_start = record.get("humane_start_local")
            legacy_end = record.get("humane_end_local")
            try:
                windows.append(fallback_window(legacy_start, legacy_end))
            except ValidationError as exc:
                rejected.append(f"legacy window: {_describe(exc)}")
        else:
            for raw in raw_windows:
                try:
                    windows.append(parse_window(participant_id, raw))
                except MalformedAvailability as exc:
                    log.warning("Dropping window for %s: %s", participant_id, exc.detail)
                    rejected.append(exc.detail)

        return cls(
            id=participant_id,
            timezone=str(record.get("timezone") or ""),
            windows=tuple(windows),
            rejected_windows=tuple(rejected),
        )
