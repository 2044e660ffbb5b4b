"""Command-line search: reads a request JSON, prints humane meeting times.

Usage:
    python -m humane_scheduling.cli request.json --tz Europe/London --limit 10
    python -m humane_scheduling.cli request.json --json --output outcome.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from humane_scheduling.config import settings
from humane_scheduling.engine import group_by_day, run_search
from humane_scheduling.errors import TimezoneResolutionFailure
from humane_scheduling.loader import dump_outcome, load_request_json
from humane_scheduling.models.search import CandidateSlot, SearchOutcome
from humane_scheduling.timezones import default_resolver

log = logging.getLogger("humane_scheduling.cli")

EXIT_INVALID = 2


def _format_slot(slot: CandidateSlot, tz_id: str) -> str:
    start = default_resolver.to_local(tz_id, slot.start_utc)
    end = default_resolver.to_local(tz_id, slot.end_utc)
    line = f"    {start.strftime('%H:%M')}-{end.strftime('%H:%M')}"
    if not slot.is_full_match:
        total = slot.available_count + len(slot.unavailable_participants)
        line += f"  ({slot.available_count}/{total}, busy: {', '.join(slot.unavailable_ids)})"
    return line


def _section(title: str, slots: list[CandidateSlot], tz_id: str, limit: int | None) -> list[str]:
    shown = slots[:limit] if limit is not None else slots
    lines = [f"{title} ({len(slots)} times)"]
    for day, day_slots in group_by_day(shown, tz_id).items():
        lines.append(f"  {day.strftime('%A, %B %d')}")
        lines.extend(_format_slot(s, tz_id) for s in day_slots)
    return lines


def format_outcome(outcome: SearchOutcome, tz_id: str = "UTC", limit: int | None = None) -> str:
    """Human-readable rendering, full matches before partial ones."""
    if not outcome.ok:
        lines = ["Invalid search request:"]
        lines.extend(f"  - {p.field}: {p.message}" for p in outcome.problems)
        return "\n".join(lines)

    lines: list[str] = []
    for issue in outcome.issues:
        lines.append(f"! {issue.participant_id}: {issue.detail}")
    for participant_id in outcome.stats.never_synced:
        lines.append(f"~ {participant_id} has no synced calendar; assumed free.")

    if not outcome.slots:
        lines.append("No times found.")
    if outcome.full_matches:
        lines.extend(_section("Everyone available", outcome.full_matches, tz_id, limit))
    if outcome.partial_matches:
        lines.extend(_section("Partial availability", outcome.partial_matches, tz_id, limit))

    if outcome.analysis:
        for suggestion in outcome.analysis.suggestions:
            lines.append(f"* {suggestion.message}")
    if outcome.summary and outcome.summary.best_partial_slot:
        best = outcome.summary.best_partial_slot
        total = best.available_count + len(best.unavailable_participants)
        start = default_resolver.to_local(tz_id, best.start_utc)
        lines.append(
            f"* Best option: {best.available_count}/{total} can make "
            f"{start.strftime('%a %d %b %H:%M')}."
        )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Find humane meeting times for a group",
        prog="python -m humane_scheduling.cli",
    )
    parser.add_argument("request_path", help="Path to the search request JSON")
    parser.add_argument("--tz", default=settings.scan_timezone, help="Timezone to display times in")
    parser.add_argument("--limit", type=int, help="Max times to show per section")
    parser.add_argument("--json", action="store_true", help="Print the full outcome as JSON")
    parser.add_argument("--output", "-o", help="Write output to this path (default: stdout)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log scan progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
    )

    try:
        default_resolver.resolve(args.tz)
    except TimezoneResolutionFailure as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID

    try:
        request = load_request_json(args.request_path)
    except (OSError, ValueError, ValidationError) as exc:
        print(f"error: could not load {args.request_path}: {exc}", file=sys.stderr)
        return EXIT_INVALID

    outcome = run_search(request)
    text = dump_outcome(outcome) if args.json else format_outcome(outcome, args.tz, args.limit)

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(outcome.slots)} times to {args.output}", file=sys.stderr)
    else:
        print(text)

    return 0 if outcome.ok else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
