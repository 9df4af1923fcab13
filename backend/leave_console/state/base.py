from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StateModel(BaseModel):
    """Immutable console state record, rendered camelCase to clients."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Banner(StateModel):
    """The single error/success message slot shown above the tabs."""

    error: str | None = None
    success: str | None = None
