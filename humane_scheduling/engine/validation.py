"""Semantic checks run before any scanning begins."""

from __future__ import annotations

import logging
from typing import Optional

from humane_scheduling.config import settings
from humane_scheduling.errors import InvalidRequest, TimezoneResolutionFailure
from humane_scheduling.models.search import SearchRequest, ValidationProblem
from humane_scheduling.timezones import ZoneInfoResolver, default_resolver

log = logging.getLogger("humane_scheduling.engine.validation")


def validate_request(
    request: SearchRequest,
    resolver: Optional[ZoneInfoResolver] = None,
) -> list[ValidationProblem]:
    """Return every problem with ``request``; empty means it can be scanned."""
    resolver = resolver or default_resolver
    problems: list[ValidationProblem] = []

    def problem(field: str, message: str) -> None:
        problems.append(ValidationProblem(field=field, message=message))

    if request.duration_minutes <= 0:
        problem("duration_minutes", "must be positive")
    if request.step_minutes <= 0:
        problem("step_minutes", "must be positive")

    if request.range_end < request.range_start:
        problem("range_end", "must not be before range_start")
    else:
        days = (request.range_end - request.range_start).days + 1
        if days > settings.max_range_days:
            problem("range_end", f"range spans {days} days; the limit is {settings.max_range_days}")

    if not request.participants:
        problem("participants", "at least one participant is required")
    elif len(request.participants) > settings.max_participants:
        problem(
            "participants",
            f"{len(request.participants)} participants; the limit is {settings.max_participants}",
        )

    seen: set[str] = set()
    for participant in request.participants:
        if participant.id in seen:
            problem("participants", f"duplicate participant id {participant.id!r}")
        seen.add(participant.id)

    try:
        resolver.resolve(request.scan_timezone)
    except TimezoneResolutionFailure:
        problem("scan_timezone", f"unknown timezone {request.scan_timezone!r}")

    return problems


def ensure_valid(request: SearchRequest, resolver: Optional[ZoneInfoResolver] = None) -> None:
    problems = validate_request(request, resolver)
    if problems:
        log.info("Rejected search request: %d problem(s)", len(problems))
        raise InvalidRequest(problems)
