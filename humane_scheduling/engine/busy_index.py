"""Per-participant index of busy intervals.

Overlapping intervals for one owner are merged into a sorted disjoint union
at build time, which lets ``is_busy`` answer with a single bisect.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections import defaultdict
from datetime import datetime
from typing import Iterable

from humane_scheduling.models.busy import BusyInterval

log = logging.getLogger("humane_scheduling.engine.busy_index")

Block = tuple[datetime, datetime]


def merge_blocks(blocks: Iterable[Block]) -> list[Block]:
    """Union of half-open blocks; touching blocks are joined."""
    merged: list[Block] = []
    for start, end in sorted(blocks):
        if merged and start <= merged[-1][1]:
            prev_start, prev_end = merged[-1]
            merged[-1] = (prev_start, max(prev_end, end))
        else:
            merged.append((start, end))
    return merged


class BusyIntervalIndex:
    """Answers "is this participant busy during ``[start, end)``?"."""

    def __init__(self, blocks_by_owner: dict[str, list[Block]]) -> None:
        self._blocks = {owner: merge_blocks(b) for owner, b in blocks_by_owner.items()}
        self._starts = {owner: [s for s, _ in b] for owner, b in self._blocks.items()}

    @classmethod
    def build(cls, intervals: Iterable[BusyInterval]) -> "BusyIntervalIndex":
        grouped: dict[str, list[Block]] = defaultdict(list)
        count = 0
        for interval in intervals:
            grouped[interval.owner_id].append((interval.start_utc, interval.end_utc))
            count += 1
        index = cls(dict(grouped))
        log.debug("Busy index built: %d intervals across %d owners", count, len(grouped))
        return index

    def is_busy(self, start_utc: datetime, end_utc: datetime, participant_id: str) -> bool:
        """Half-open overlap: ``start < busy_end and end > busy_start``.

        A participant with no synced intervals is never busy.
        """
        starts = self._starts.get(participant_id)
        if not starts:
            return False
        # Every block left of ``i`` starts before the slot ends; the last of
        # them ends latest because the union is disjoint and sorted.
        i = bisect_left(starts, end_utc)
        if i == 0:
            return False
        return self._blocks[participant_id][i - 1][1] > start_utc

    def has_data(self, participant_id: str) -> bool:
        return bool(self._blocks.get(participant_id))
