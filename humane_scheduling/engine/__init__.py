"""Availability intersection and match classification engine."""

from __future__ import annotations

from typing import Optional

from humane_scheduling.engine.analyzer import analyze, group_by_day, summarize
from humane_scheduling.engine.busy_index import BusyIntervalIndex
from humane_scheduling.engine.classifier import classify
from humane_scheduling.engine.normalizer import TimeWindowNormalizer, is_compatible
from humane_scheduling.engine.scanner import ScanResult, scan, scan_with_diagnostics
from humane_scheduling.engine.validation import ensure_valid, validate_request
from humane_scheduling.errors import InvalidRequest
from humane_scheduling.models.search import SearchOutcome, SearchRequest

__all__ = [
    "BusyIntervalIndex",
    "ScanResult",
    "TimeWindowNormalizer",
    "analyze",
    "classify",
    "ensure_valid",
    "group_by_day",
    "is_compatible",
    "run_search",
    "scan",
    "scan_with_diagnostics",
    "summarize",
    "validate_request",
]


def run_search(
    request: SearchRequest,
    normalizer: Optional[TimeWindowNormalizer] = None,
) -> SearchOutcome:
    """Scan, classify and analyse one request.

    Never raises for a bad request: validation problems come back as
    ``SearchOutcome(ok=False, problems=[...])``.
    """
    normalizer = normalizer or TimeWindowNormalizer()
    try:
        result = scan_with_diagnostics(request, normalizer)
    except InvalidRequest as exc:
        return SearchOutcome(ok=False, problems=exc.problems)

    analysis = analyze(
        result.slots,
        request.participants,
        reference=result.range_start_utc,
        resolver=normalizer.resolver,
    )
    return SearchOutcome(
        ok=True,
        slots=result.slots,
        stats=result.stats,
        issues=result.issues,
        summary=analysis.blockers,
        analysis=analysis,
    )
