"""Normalisation boundary for upstream payloads.

Every response from the HR backend passes through :func:`parse_list` or
:func:`parse_item`. Shapes that do not match the declared schema raise
:class:`UnexpectedResponseError` rather than being defaulted.
"""

from __future__ import annotations

from datetime import date, datetime
from functools import lru_cache
from typing import Annotated, Any, TypeVar

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from leave_console.exceptions import UnexpectedResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


class WireModel(BaseModel):
    """Base for models exchanged with the HR backend (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


def _ref_id(value: Any) -> Any:
    """Collapse a populated reference (``{"_id": ..., "name": ...}``) to its id."""
    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return value


def _to_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


RefId = Annotated[str, BeforeValidator(_ref_id)]
WireDate = Annotated[date, BeforeValidator(_to_date)]


def id_field() -> Any:
    """Identifier field accepting either ``_id`` or ``id`` on the wire."""
    return Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="id")


def optional_id_field() -> Any:
    return Field(default=None, validation_alias=AliasChoices("_id", "id"), serialization_alias="id")


def unwrap_list(payload: Any, what: str) -> list[Any]:
    """Accept ``[...]`` or ``{"data": [...]}``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    msg = f"Expected a list of {what}, got {type(payload).__name__}"
    raise UnexpectedResponseError(msg)


@lru_cache(maxsize=None)
def _list_adapter(model: type[BaseModel]) -> TypeAdapter[list[Any]]:
    return TypeAdapter(list[model])  # type: ignore[valid-type]


def parse_list(model: type[ModelT], payload: Any, what: str) -> list[ModelT]:
    """Validate a list response into ``model`` instances."""
    items = unwrap_list(payload, what)
    try:
        return _list_adapter(model).validate_python(items)
    except ValidationError as exc:
        msg = f"Malformed {what} in upstream response: {exc.error_count()} error(s)"
        raise UnexpectedResponseError(msg) from exc


def parse_item(model: type[ModelT], payload: Any, what: str) -> ModelT:
    """Validate a single-object response, unwrapping ``{"data": {...}}`` if present."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    if not isinstance(payload, dict):
        msg = f"Expected a {what} object, got {type(payload).__name__}"
        raise UnexpectedResponseError(msg)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        msg = f"Malformed {what} in upstream response: {exc.error_count()} error(s)"
        raise UnexpectedResponseError(msg) from exc


def dump_payload(model: BaseModel) -> dict[str, Any]:
    """Serialise a request model the way the HR backend expects it."""
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")
