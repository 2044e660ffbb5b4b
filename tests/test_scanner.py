"""End-to-end tests for the candidate scanner and match classification."""

from datetime import date, datetime, timedelta, timezone

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from humane_scheduling.engine import is_compatible, scan, scan_with_diagnostics
from humane_scheduling.errors import InvalidRequest
from humane_scheduling.models import Participant

MONDAY = date(2025, 1, 6)
TUESDAY = date(2025, 1, 7)
SATURDAY = date(2025, 1, 4)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


# ── Scenarios ──────────────────────────────────────────────────────


class TestScenarios:
    def test_same_timezone_same_windows(self, participant, request_for):
        people = [participant("user1@test.com"), participant("user2@test.com")]
        slots = scan(request_for(people, TUESDAY))

        assert slots, "should find at least one slot"
        assert all(s.is_full_match for s in slots)
        # January: Europe/London is UTC+0
        assert slots[0].start_utc == utc(2025, 1, 7, 9)
        assert slots[-1].start_utc == utc(2025, 1, 7, 16)
        assert len(slots) == 15
        for s in slots:
            assert utc(2025, 1, 7, 9) <= s.start_utc and s.end_utc <= utc(2025, 1, 7, 17)

    def test_summer_time_shifts_utc_slots(self, participant, request_for):
        slots = scan(request_for([participant("a")], date(2025, 7, 8)))
        assert slots[0].start_utc == utc(2025, 7, 8, 8)
        assert slots[-1].end_utc == utc(2025, 7, 8, 16)

    def test_narrow_window_single_slot(self, participant, request_for):
        people = [participant("a", windows=[{"start": "08:00", "end": "09:00", "type": "weekday"}])]
        slots = scan(request_for(people, MONDAY, duration=60))
        assert len(slots) == 1
        assert slots[0].start_utc == utc(2025, 1, 6, 8)
        assert slots[0].end_utc == utc(2025, 1, 6, 9)

    def test_narrow_window_with_wider_partner(self, participant, request_for):
        people = [
            participant("a", windows=[{"start": "08:00", "end": "09:00", "type": "weekday"}]),
            participant("b", windows=[{"start": "08:00", "end": "17:00", "type": "weekday"}]),
        ]
        slots = scan(request_for(people, MONDAY))
        assert [s.start_utc for s in slots] == [utc(2025, 1, 6, 8)]

    def test_weekday_window_on_saturday(self, participant, request_for):
        assert scan(request_for([participant("a")], SATURDAY)) == []

    def test_weekend_window_on_saturday(self, participant, request_for):
        people = [participant("a", windows=[{"start": "10:00", "end": "14:00", "type": "weekend"}])]
        assert len(scan(request_for(people, SATURDAY))) == 7

    def test_non_overlapping_windows(self, participant, request_for):
        people = [
            participant("a", windows=[{"start": "09:00", "end": "12:00", "type": "weekday"}]),
            participant("b", windows=[{"start": "14:00", "end": "17:00", "type": "weekday"}]),
        ]
        assert scan(request_for(people, MONDAY)) == []

    def test_busy_block_makes_partial(self, participant, busy, request_for):
        people = [participant("a", tz="UTC", windows=[{"start": "09:00", "end": "11:00", "type": "weekday"}])]
        blocks = [busy("a", utc(2025, 1, 6, 9), utc(2025, 1, 6, 10))]
        slots = scan(request_for(people, MONDAY, busy_intervals=blocks))

        by_start = {s.start_utc: s for s in slots}
        nine = by_start[utc(2025, 1, 6, 9)]
        assert not nine.is_full_match
        assert nine.unavailable_ids == ("a",)
        assert nine.unavailable_participants[0].reason == "busy"
        assert nine.available_participant_ids == ()

        ten = by_start[utc(2025, 1, 6, 10)]
        assert ten.is_full_match
        assert ten.available_participant_ids == ("a",)

    def test_cross_timezone_overlap(self, participant, request_for):
        people = [
            participant("london", windows=[{"start": "14:00", "end": "17:00", "type": "weekday"}]),
            participant("nyc", tz="America/New_York", windows=[{"start": "09:00", "end": "12:00", "type": "weekday"}]),
        ]
        slots = scan(request_for(people, MONDAY))
        assert [s.start_utc.hour + s.start_utc.minute / 60 for s in slots] == [14, 14.5, 15, 15.5, 16]

    def test_partial_only_relaxes_busy_constraint(self, participant, busy, request_for):
        people = [
            participant("a", tz="UTC", windows=[{"start": "09:00", "end": "12:00", "type": "everyday"}]),
            participant("b", tz="UTC", windows=[{"start": "10:00", "end": "12:00", "type": "everyday"}]),
        ]
        blocks = [busy("b", utc(2025, 1, 6, 0), utc(2025, 1, 7, 0))]
        slots = scan(request_for(people, MONDAY, busy_intervals=blocks))
        # 09:00 suits only a's pattern, so it is never offered even as partial
        assert [s.start_utc for s in slots] == [utc(2025, 1, 6, 10), utc(2025, 1, 6, 10, 30), utc(2025, 1, 6, 11)]
        assert not any(s.is_full_match for s in slots)


# ── Scan range and stepping ────────────────────────────────────────


class TestScanRange:
    def test_multi_day_range(self, participant, request_for):
        # Mon 6th .. Sun 12th: five working days of 15 hourly-ish slots
        slots = scan(request_for([participant("a")], MONDAY, end_day=date(2025, 1, 12)))
        assert len(slots) == 5 * 15
        assert {s.start_utc.date() for s in slots} == {MONDAY + timedelta(days=i) for i in range(5)}

    def test_last_slot_must_end_by_end_of_range(self, participant, request_for):
        people = [participant("a", tz="UTC", windows=[{"start": "00:00", "end": "23:59", "type": "everyday"}])]
        result = scan_with_diagnostics(request_for(people, MONDAY, duration=30))
        assert result.stats.slots_checked == 48
        assert result.slots[-1].start_utc == utc(2025, 1, 6, 23)

    def test_step_minutes(self, participant, request_for):
        people = [participant("a", tz="UTC")]
        slots = scan(request_for(people, MONDAY, step_minutes=60))
        assert [s.start_utc.hour for s in slots] == list(range(9, 17))

    def test_scan_timezone_moves_the_day(self, participant, request_for):
        # Scanning Monday in Auckland (UTC+13) covers Sunday 11:00 UTC onwards.
        people = [participant("a", tz="UTC", windows=[{"start": "09:00", "end": "17:00", "type": "everyday"}])]
        slots = scan(request_for(people, MONDAY, scan_timezone="Pacific/Auckland"))
        assert slots[0].start_utc == utc(2025, 1, 5, 11)
        assert slots[-1].end_utc <= utc(2025, 1, 6, 11)

    def test_dst_day_in_participant_zone(self, participant, request_for):
        # London springs forward on Sunday 30 March 2025.
        people = [participant("a", windows=[{"start": "09:00", "end": "17:00", "type": "everyday"}])]
        slots = scan(request_for(people, date(2025, 3, 29), end_day=date(2025, 3, 30)))
        saturday = [s for s in slots if s.start_utc.day == 29]
        sunday = [s for s in slots if s.start_utc.day == 30]
        assert saturday[0].start_utc == utc(2025, 3, 29, 9)
        assert sunday[0].start_utc == utc(2025, 3, 30, 8)
        assert len(saturday) == len(sunday) == 15


# ── Data-quality handling ──────────────────────────────────────────


class TestDataQuality:
    def test_unknown_timezone_reported_and_fails_closed(self, participant, request_for):
        people = [participant("a"), participant("b", tz="Mars/Olympus_Mons")]
        result = scan_with_diagnostics(request_for(people, MONDAY))
        assert result.slots == []
        assert [(i.kind, i.participant_id) for i in result.issues] == [("timezone_resolution_failure", "b")]

    def test_malformed_window_reported_but_search_continues(self, participant, request_for):
        people = [
            participant("a"),
            participant("b", windows=[
                {"start": "17:00", "end": "09:00", "type": "weekday"},
                {"start": "09:00", "end": "17:00", "type": "weekday"},
            ]),
        ]
        result = scan_with_diagnostics(request_for(people, MONDAY))
        assert len(result.slots) == 15
        assert [i.kind for i in result.issues] == ["malformed_availability"]
        assert result.issues[0].participant_id == "b"

    def test_invalid_request_raises_before_scanning(self, participant, request_for):
        with pytest.raises(InvalidRequest) as exc_info:
            scan(request_for([participant("a")], MONDAY, duration=0))
        assert exc_info.value.problems[0].field == "duration_minutes"

    def test_stats(self, participant, busy, request_for):
        people = [participant("a", tz="UTC", windows=[{"start": "09:00", "end": "11:00", "type": "weekday"}])]
        blocks = [busy("a", utc(2025, 1, 6, 9), utc(2025, 1, 6, 10))]
        stats = scan_with_diagnostics(request_for(people, MONDAY, busy_intervals=blocks)).stats
        assert stats.slots_checked == 47
        assert stats.partial_matches == 2
        assert stats.full_matches == 1
        assert stats.rejected_by_pattern == 44

    def test_never_synced_participants_listed(self, participant, busy, request_for):
        people = [participant("a"), participant("b")]
        blocks = [busy("a", utc(2025, 1, 6, 12), utc(2025, 1, 6, 13))]
        result = scan_with_diagnostics(request_for(people, MONDAY, busy_intervals=blocks))
        assert result.stats.never_synced == ["b"]
        # No data means free, never unavailable
        assert all("b" in s.available_participant_ids for s in result.slots)


# ── Properties ─────────────────────────────────────────────────────


@pytest.fixture
def mixed_group(participant, busy, request_for):
    people = [
        participant("london", windows=[{"start": "08:00", "end": "18:00", "type": "weekday"}]),
        participant("nyc", tz="America/New_York", windows=[
            {"start": "07:00", "end": "09:00", "type": "weekday"},
            {"start": "10:00", "end": "13:00", "type": "weekday"},
        ]),
        participant("dubai", tz="Asia/Dubai", windows=[{"start": "09:00", "end": "21:00", "type": "me_workday"}]),
    ]
    blocks = [
        busy("london", utc(2025, 1, 6, 13), utc(2025, 1, 6, 14)),
        busy("nyc", utc(2025, 1, 7, 15), utc(2025, 1, 7, 16, 30)),
        busy("dubai", utc(2025, 1, 6, 15, 30), utc(2025, 1, 6, 16)),
        busy("dubai", utc(2025, 1, 8, 12), utc(2025, 1, 8, 17)),
    ]
    return request_for(people, MONDAY, end_day=date(2025, 1, 10), duration=45, busy_intervals=blocks)


class TestProperties:
    def test_every_slot_humane_for_everyone(self, mixed_group):
        slots = scan(mixed_group)
        assert slots
        for s in slots:
            for p in mixed_group.participants:
                assert is_compatible(s.start_utc, s.end_utc, p)

    def test_partition(self, mixed_group):
        everyone = {p.id for p in mixed_group.participants}
        for s in scan(mixed_group):
            available = set(s.available_participant_ids)
            unavailable = set(s.unavailable_ids)
            assert not available & unavailable
            assert available | unavailable == everyone

    def test_full_match_definition(self, mixed_group):
        for s in scan(mixed_group):
            assert s.is_full_match == (len(s.unavailable_participants) == 0)

    def test_ascending_order(self, mixed_group):
        starts = [s.start_utc for s in scan(mixed_group)]
        assert starts == sorted(starts)

    def test_adding_busy_never_adds_full_matches(self, mixed_group, busy):
        before = scan(mixed_group)
        extra = busy("london", utc(2025, 1, 7, 14), utc(2025, 1, 7, 17))
        after = scan(mixed_group.model_copy(update={"busy_intervals": [*mixed_group.busy_intervals, extra]}))

        assert sum(s.is_full_match for s in after) <= sum(s.is_full_match for s in before)
        before_by_start = {s.start_utc: s for s in before}
        for s in after:
            previously = before_by_start[s.start_utc]
            for pid in previously.unavailable_ids:
                assert pid in s.unavailable_ids

    def test_idempotent(self, mixed_group):
        first = [s.model_dump_json() for s in scan(mixed_group)]
        second = [s.model_dump_json() for s in scan(mixed_group)]
        assert first == second

    def test_participants_ordered_by_roster(self, mixed_group):
        order = [p.id for p in mixed_group.participants]
        for s in scan(mixed_group):
            ids = list(s.available_participant_ids)
            assert ids == [i for i in order if i in ids]
