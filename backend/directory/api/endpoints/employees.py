from __future__ import annotations

import logging

from fastapi import APIRouter, status

from directory.core.errors import DirectoryError, UnexpectedError
from directory.models.employee import (
    DeletedEnvelope,
    EmployeeCreate,
    EmployeeEnvelope,
    EmployeeListEnvelope,
    EmployeeUpdate,
)
from directory.services.employee_service import employee_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=EmployeeListEnvelope, response_model_exclude_none=True)
async def list_employees():
    try:
        employees = await employee_service.list_employees()
    except DirectoryError:
        raise
    except Exception as err:
        logger.exception("Failed to list employees")
        raise UnexpectedError() from err

    return EmployeeListEnvelope(count=len(employees), data=employees)


@router.get("/{employee_id}", response_model=EmployeeEnvelope, response_model_exclude_none=True)
async def get_employee(employee_id: str):
    try:
        employee = await employee_service.get_employee(employee_id)
    except DirectoryError:
        raise
    except Exception as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise UnexpectedError() from err

    return EmployeeEnvelope(data=employee)


@router.post(
    "",
    response_model=EmployeeEnvelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(payload: EmployeeCreate):
    try:
        employee = await employee_service.create_employee(payload)
    except DirectoryError:
        raise
    except Exception as err:
        logger.exception("Failed to create employee")
        raise UnexpectedError() from err

    return EmployeeEnvelope(message="Employee created successfully", data=employee)


@router.put("/{employee_id}", response_model=EmployeeEnvelope, response_model_exclude_none=True)
async def update_employee(employee_id: str, payload: EmployeeUpdate):
    try:
        employee = await employee_service.update_employee(employee_id, payload)
    except DirectoryError:
        raise
    except Exception as err:
        logger.exception("Failed to update employee %s", employee_id)
        raise UnexpectedError() from err

    return EmployeeEnvelope(message="Employee updated successfully", data=employee)


@router.delete("/{employee_id}", response_model=DeletedEnvelope)
async def delete_employee(employee_id: str):
    try:
        await employee_service.delete_employee(employee_id)
    except DirectoryError:
        raise
    except Exception as err:
        logger.exception("Failed to delete employee %s", employee_id)
        raise UnexpectedError() from err

    return DeletedEnvelope()
