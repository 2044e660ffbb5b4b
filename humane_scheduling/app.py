"""FastAPI application: HTTP access to the matching engine.

Endpoints:

  GET  /health   Health check
  POST /search   Run a search; body is a request document (see loader.py)

Invalid requests come back as 422 with ``{"ok": false, "problems": [...]}``
so UIs can render them next to the offending field.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from humane_scheduling.config import settings
from humane_scheduling.engine import run_search
from humane_scheduling.loader import RequestDocumentError, parse_request

log = logging.getLogger("humane_scheduling.app")

_START_TIME = time.time()


def _problems_from(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]) or "body", "message": err["msg"]}
        for err in exc.errors()
    ]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Humane Scheduling",
        description="Meeting-time matching across timezones and calendars",
        version="0.1.0",
    )

    @app.get("/health")
    async def health() -> JSONResponse:
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    @app.post("/search")
    def search(document: dict[str, Any] = Body(...)) -> JSONResponse:
        # Sync handler: FastAPI runs it in the thread pool, keeping the
        # CPU-bound scan off the event loop.
        try:
            request = parse_request(document)
        except ValidationError as exc:
            return JSONResponse(
                status_code=422,
                content={"ok": False, "problems": _problems_from(exc)},
            )
        except RequestDocumentError as exc:
            return JSONResponse(
                status_code=422,
                content={"ok": False, "problems": [{"field": exc.field, "message": exc.message}]},
            )

        outcome = run_search(request)
        if not outcome.ok:
            log.info("Search rejected: %s", [p.field for p in outcome.problems])
            return JSONResponse(status_code=422, content=outcome.model_dump(mode="json"))
        return JSONResponse(outcome.model_dump(mode="json"))

    return app


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
    )
    for warning in settings.validate_startup():
        log.warning(warning)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=settings.host, port=settings.port)
