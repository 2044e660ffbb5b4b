"""Shared builders for engine tests."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from humane_scheduling.models import BusyInterval, Participant, SearchRequest


@pytest.fixture
def participant():
    def build(pid, tz="Europe/London", windows=None):
        if windows is None:
            windows = [{"start": "09:00", "end": "17:00", "type": "weekday"}]
        return Participant.from_record({"id": pid, "timezone": tz, "windows": windows})
    return build


@pytest.fixture
def busy():
    def build(owner, start, end):
        return BusyInterval(owner_id=owner, start_utc=start, end_utc=end)
    return build


@pytest.fixture
def request_for():
    def build(participants, day, end_day=None, duration=60, busy_intervals=(), **kwargs):
        return SearchRequest(
            participants=list(participants),
            busy_intervals=list(busy_intervals),
            range_start=day,
            range_end=end_day or day,
            duration_minutes=duration,
            **kwargs,
        )
    return build

