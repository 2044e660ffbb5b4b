"""Last-request-wins wrapper for interactive callers.

The engine is synchronous and stateless. A UI that re-searches whenever a
date picker or duration changes submits through a ``SearchRunner``: the scan
runs in the default thread pool and, if a newer submission arrived while it
was running, its result is dropped instead of being applied over fresher
output.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Callable, Optional

from humane_scheduling.engine import run_search
from humane_scheduling.models.search import SearchOutcome, SearchRequest

log = logging.getLogger("humane_scheduling.runner")


class SearchRunner:
    """Runs searches off the event loop and discards superseded results."""

    def __init__(self, search: Callable[[SearchRequest], SearchOutcome] = run_search) -> None:
        self._search = search
        self._generation = 0

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run a synchronous call in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    @property
    def generation(self) -> int:
        return self._generation

    def cancel_pending(self) -> None:
        """Invalidate every in-flight search without starting a new one."""
        self._generation += 1

    async def submit(self, request: SearchRequest) -> Optional[SearchOutcome]:
        """Run ``request``; ``None`` means a newer submission superseded it."""
        self._generation += 1
        ticket = self._generation

        outcome = await self._run_in_executor(self._search, request)

        if ticket != self._generation:
            log.info("Discarding stale search result (ticket %d, current %d)", ticket, self._generation)
            return None
        return outcome
