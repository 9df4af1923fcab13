from __future__ import annotations

from typing import Any

from pydantic import model_validator

from leave_console.schemas.common import WireModel, id_field


class EmployeeOption(WireModel):
    """Employee entry offered in the console's employee pickers."""

    id: str = id_field()
    first_name: str = ""
    last_name: str = ""
    employee_number: str = ""
    full_name: str = ""

    @model_validator(mode="before")
    @classmethod
    def _fill_full_name(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {k: v for k, v in data.items() if v is not None}
            if not data.get("fullName") and not data.get("full_name"):
                first = data.get("firstName", data.get("first_name", ""))
                last = data.get("lastName", data.get("last_name", ""))
                data["fullName"] = f"{first} {last}".strip()
        return data

    def matches(self, search: str) -> bool:
        """Case-insensitive match on name, employee number or id."""
        needle = search.lower()
        return (
            needle in f"{self.first_name} {self.last_name}".lower()
            or needle in self.employee_number.lower()
            or needle in self.id.lower()
        )
