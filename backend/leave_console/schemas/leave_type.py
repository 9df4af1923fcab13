from __future__ import annotations

from typing import Any

from pydantic import Field

from leave_console.models.enums import AttachmentType
from leave_console.schemas.common import RefId, WireModel, id_field


class Eligibility(WireModel):
    """Rules gating which employees may take a leave type."""

    min_tenure_months: int | None = Field(default=None, ge=0)
    positions_allowed: list[str] = Field(default_factory=list)
    contract_types_allowed: list[str] = Field(default_factory=list)
    employment_types: list[str] = Field(default_factory=list)


class LeaveType(WireModel):
    """A leave type as stored by the HR backend."""

    id: str = id_field()
    code: str
    name: str
    category_id: RefId
    description: str | None = None
    paid: bool = True
    deductible: bool = True
    requires_attachment: bool = False
    attachment_type: AttachmentType | None = None
    min_tenure_months: int | None = None
    max_duration_days: int | None = None
    eligibility: Eligibility | None = None

    @property
    def label(self) -> str:
        return f"{self.name} ({self.code})" if self.code else self.name


class LeaveTypeInput(WireModel):
    """Leave type form; also the create/update request body."""

    code: str = ""
    name: str = ""
    category_id: str = ""
    description: str = ""
    paid: bool = True
    deductible: bool = True
    requires_attachment: bool = False
    attachment_type: AttachmentType = AttachmentType.MEDICAL
    min_tenure_months: int | None = Field(default=None, ge=0)
    max_duration_days: int | None = Field(default=None, ge=1)


class SpecialAbsenceConfig(WireModel):
    """Special absence / mission settings attached to a leave type."""

    is_special_absence: bool = False
    is_mission_type: bool = False
    track_sick_leave_cycle: bool = False
    sick_leave_max_days: int = Field(default=360, ge=0)
    sick_leave_cycle_years: int = Field(default=3, ge=1)
    track_maternity_count: bool = False
    max_maternity_count: int | None = Field(default=None, ge=0)
    requires_special_approval: bool = False
    special_rules: dict[str, Any] = Field(default_factory=dict)
