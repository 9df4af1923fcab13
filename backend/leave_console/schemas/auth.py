from __future__ import annotations

from pydantic import BaseModel

from leave_console.models.enums import SystemRole


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    user_id: str
    role: SystemRole
