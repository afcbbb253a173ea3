from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from client_timeline.domain.exceptions import ValidationException
from client_timeline.domain.value_objects.event_date import (UNSET_DATE,
                                                             validate_event_date,
                                                             validate_event_time)
from client_timeline.domain.value_objects.icons import MAX_ICON_LENGTH


SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _check_icon(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Icon is required")
    if len(v) > MAX_ICON_LENGTH:
        raise ValueError("Icon is too long")
    return v


def _check_date(v: str) -> str:
    try:
        return validate_event_date(v)
    except ValidationException as e:
        raise ValueError(e.message) from e


def _check_time(v: str | None) -> str | None:
    try:
        return validate_event_time(v)
    except ValidationException as e:
        raise ValueError(e.message) from e


class EventCreate(BaseModel):
    """Fields a user supplies for a new event"""

    icon: str
    date: str = UNSET_DATE
    description: str = ""
    time: str | None = None
    icon_size: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("icon")
    @classmethod
    def validate_icon(cls, v: str) -> str:
        return _check_icon(v)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return _check_date(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str | None) -> str | None:
        return _check_time(v)


class EventUpdate(BaseModel):
    """
    Partial edit of an existing event; unset fields are left alone.

    Status and position are not editable here; they move only through
    the status cycle.
    """

    icon: str | None = None
    date: str | None = None
    description: str | None = None
    time: str | None = None
    icon_size: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("icon")
    @classmethod
    def validate_icon(cls, v: str | None) -> str | None:
        return None if v is None else _check_icon(v)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str | None) -> str | None:
        return None if v is None else _check_date(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str | None) -> str | None:
        return _check_time(v)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly provided by the caller"""
        return self.model_dump(exclude_unset=True)


def parse_input(schema: type[SchemaT], data: SchemaT | dict[str, Any]) -> SchemaT:
    """
    Coerce raw input into ``schema``.

    Raises:
        ValidationException: With the first failing field
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationException(first.get("msg", str(e)), field=field) from e
