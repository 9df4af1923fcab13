from __future__ import annotations

from pydantic import AliasChoices, Field

from leave_console.schemas.common import WireModel, id_field


class RoleUser(WireModel):
    """User profile returned by the role management search."""

    id: str = id_field()
    full_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("fullName", "fullname", "name"),
    )
    email: str | None = None
    employee_number: str | None = None
    role: str = ""


class RoleUpdate(WireModel):
    """Request body for changing a user's role."""

    role: str
    actor_id: str | None = None
