"""Holiday calendar Pydantic V2 schemas."""

from __future__ import annotations

import datetime as dt
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.drip.working_days import to_utc_date
from app.exceptions import InvalidDateError


class CreateHolidayRequest(BaseModel):
    """Mark a calendar day as a holiday.

    ``date`` accepts ``YYYY-MM-DD`` or a full ISO-8601 timestamp; only the
    UTC calendar day is kept.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    date: dt.date = Field(description="Holiday date (day granularity, UTC).")
    reason: str = Field(default="", max_length=300, description="Why drip pauses on this day.")

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: object) -> object:
        if isinstance(value, (str, datetime)):
            try:
                return to_utc_date(value)
            except InvalidDateError as exc:
                raise ValueError(str(exc)) from exc
        return value


class HolidayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    holiday_id: UUID
    date: dt.date
    reason: str
    created_at: datetime


class HolidayListResponse(BaseModel):
    items: list[HolidayResponse]
    total: int
