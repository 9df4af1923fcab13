# ruff: noqa: TC003
from __future__ import annotations

import datetime
from typing import Any

from pydantic import Field, field_validator

from leave_console.schemas.common import WireDate, WireModel


class BlockedPeriod(WireModel):
    """Date range in which leave may not be taken."""

    start: WireDate = Field(alias="from")
    end: WireDate = Field(alias="to")
    reason: str = ""

    @field_validator("reason", mode="before")
    @classmethod
    def _blank_reason(cls, value: Any) -> Any:
        return "" if value is None else value


class LeaveCalendar(WireModel):
    """Holidays and blocked periods of one leave year."""

    holidays: list[WireDate] = Field(default_factory=list)
    blocked_periods: list[BlockedPeriod] = Field(default_factory=list)


class HolidayInput(WireModel):
    """Holiday form."""

    date: datetime.date | None = None
    reason: str = ""


class BlockedPeriodInput(WireModel):
    """Blocked period form."""

    start: datetime.date | None = Field(default=None, alias="from")
    end: datetime.date | None = Field(default=None, alias="to")
    reason: str = ""
