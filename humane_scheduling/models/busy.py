"""Pydantic model for machine-sourced busy intervals."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class BusyInterval(BaseModel):
    """Half-open ``[start_utc, end_utc)`` block from a synced calendar.

    Accepts the calendar-sync cache column names (``profile_email``,
    ``start_time``, ``end_time``) as well as the field names.
    """

    model_config = ConfigDict(frozen=True)

    owner_id: str = Field(validation_alias=AliasChoices("owner_id", "profile_email"))
    start_utc: datetime = Field(validation_alias=AliasChoices("start_utc", "start_time"))
    end_utc: datetime = Field(validation_alias=AliasChoices("end_utc", "end_time"))

    @field_validator("start_utc", "end_utc")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _check_order(self) -> "BusyInterval":
        if self.end_utc <= self.start_utc:
            raise ValueError("busy interval must end after it starts")
        return self
