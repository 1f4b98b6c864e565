"""Add/edit form state for the employee list page."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from directory.models.employee import Department, Employee

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


class EmployeeFormData(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    department: str = Department.ENGINEERING.value
    position: str = ""
    joining_date: str = ""

    @classmethod
    def from_employee(cls, employee: Employee) -> EmployeeFormData:
        """Pre-fill the form when editing an existing record."""
        return cls(
            name=employee.name,
            email=employee.email,
            phone=employee.phone or "",
            department=employee.department,
            position=employee.position,
            joining_date=employee.joining_date.isoformat() if employee.joining_date else "",
        )

    def missing_required(self) -> bool:
        return not (self.name.strip() and self.email.strip() and self.position.strip())

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "department": self.department,
            "position": self.position,
        }
        if self.joining_date.strip():
            payload["joiningDate"] = self.joining_date.strip()
        return payload
