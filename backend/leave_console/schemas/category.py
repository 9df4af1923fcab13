from __future__ import annotations

from leave_console.schemas.common import WireModel, id_field


class LeaveCategory(WireModel):
    """A grouping of leave types (e.g. Annual, Sick)."""

    id: str = id_field()
    name: str
    description: str | None = None


class CategoryInput(WireModel):
    """Category form; also the create/update request body."""

    name: str = ""
    description: str = ""
