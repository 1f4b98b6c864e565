"""Employee models: write payloads with field rules, stored record, envelopes."""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
POSITION_MIN_LENGTH = 2

_EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$")


class Department(str, Enum):
    ENGINEERING = "Engineering"
    MARKETING = "Marketing"
    HUMAN_RESOURCES = "Human Resources"
    SALES = "Sales"
    FINANCE = "Finance"


DEPARTMENTS: tuple[str, ...] = tuple(d.value for d in Department)

# Labels used for "<field> is required" messages.
FIELD_LABELS: dict[str, str] = {
    "name": "Name",
    "email": "Email",
    "department": "Department",
    "position": "Position",
}


def _required(field: str) -> PydanticCustomError:
    return PydanticCustomError("required", "{label} is required", {"label": FIELD_LABELS[field]})


class EmployeeFields(BaseModel):
    """Writable employee fields. Only fields that are present get validated."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    department: Department | None = None
    position: str | None = None
    joining_date: date | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise _required("name")
        if len(value) < NAME_MIN_LENGTH:
            raise PydanticCustomError("too_short", "Name must be at least 2 characters")
        if len(value) > NAME_MAX_LENGTH:
            raise PydanticCustomError("too_long", "Name cannot exceed 100 characters")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        if not value:
            raise _required("email")
        if not _EMAIL_RE.match(value):
            raise PydanticCustomError("email", "Please provide a valid email")
        return value

    @field_validator("phone")
    @classmethod
    def _trim_phone(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @field_validator("department", mode="before")
    @classmethod
    def _check_department(cls, value: Any) -> Any:
        if value is None or isinstance(value, Department):
            return value
        if value == "":
            raise _required("department")
        if value not in DEPARTMENTS:
            raise PydanticCustomError(
                "department",
                "{value} is not a valid department",
                {"value": str(value)},
            )
        return value

    @field_validator("position")
    @classmethod
    def _check_position(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise _required("position")
        if len(value) < POSITION_MIN_LENGTH:
            raise PydanticCustomError("too_short", "Position must be at least 2 characters")
        return value

    @field_validator("joining_date", mode="before")
    @classmethod
    def _blank_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def changes(self) -> dict[str, Any]:
        """Supplied fields as a camelCase document fragment."""
        return self.model_dump(
            by_alias=True,
            mode="json",
            exclude_unset=True,
            exclude_none=True,
        )


class EmployeeCreate(EmployeeFields):
    name: str
    email: str
    phone: str | None = ""
    department: Department
    position: str


class EmployeeUpdate(EmployeeFields):
    pass


class Employee(BaseModel):
    """A persisted employee record."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    id: str
    name: str
    email: str
    phone: str = ""
    department: Department
    position: str
    joining_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EmployeeEnvelope(BaseModel):
    ok: bool = True
    message: str | None = None
    data: Employee


class EmployeeListEnvelope(BaseModel):
    ok: bool = True
    count: int
    data: list[Employee]


class DeletedEnvelope(BaseModel):
    ok: bool = True
    message: str = "Employee deleted successfully"
    data: dict[str, Any] = {}
