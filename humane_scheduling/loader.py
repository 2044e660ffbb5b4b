"""Load search requests from JSON documents.

Document shape::

    {
      "participants": [
        {"email": "a@example.com", "timezone": "Europe/London",
         "humane_windows": [{"start": "09:00", "end": "17:00", "type": "weekday"}]}
      ],
      "busy_intervals": [
        {"profile_email": "a@example.com",
         "start_time": "2025-01-06T09:00:00Z", "end_time": "2025-01-06T10:00:00Z"}
      ],
      "range_start": "2025-01-06",
      "range_end": "2025-01-10",
      "duration_minutes": 60
    }

Participants go through ``Participant.from_record`` so a malformed window
drops only that window.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from humane_scheduling.models.availability import Participant
from humane_scheduling.models.search import SearchRequest


class RequestDocumentError(ValueError):
    """A request document has the wrong shape outside what pydantic checks."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def parse_request(data: dict[str, Any]) -> SearchRequest:
    """Parse a raw dict into a SearchRequest.

    Raises ``pydantic.ValidationError`` for structurally broken documents
    (missing dates, non-numeric duration, busy intervals that end before
    they start) and RequestDocumentError when a participant entry is not
    a record at all.
    """
    data = dict(data)
    raw_participants = data.get("participants", []) or []
    if not isinstance(raw_participants, list):
        raise RequestDocumentError("participants", "expected a list of participant records")
    participants: list[Participant] = []
    for idx, record in enumerate(raw_participants):
        if isinstance(record, Participant):
            participants.append(record)
        elif not isinstance(record, Mapping):
            raise RequestDocumentError(
                f"participants.{idx}", f"expected a participant record, got {record!r}"
            )
        else:
            participants.append(Participant.from_record(record))
    data["participants"] = participants
    data["busy_intervals"] = data.get("busy_intervals", None) or data.get("busy_slots", None) or []
    data.pop("busy_slots", None)
    return SearchRequest(**data)


def load_request_json(path: str | Path) -> SearchRequest:
    """Load a single search request from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return parse_request(data)


def dump_outcome(outcome: Any) -> str:
    """Serialise a SearchOutcome (or any model) as indented JSON."""
    return outcome.model_dump_json(indent=2)
