"""Employee registration and lookup endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from attendance_payroll.api.dependencies import Directory
from attendance_payroll.api.schemas import (
    EmployeeCreateRequest,
    EmployeeResponse,
    ErrorResponse,
)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    directory: Directory,
    include_terminated: Annotated[bool, Query()] = True,
) -> list[EmployeeResponse]:
    """List employees in id order."""
    employees = await directory.list_employees(include_terminated=include_terminated)
    return [EmployeeResponse.from_employee(e) for e in employees]


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_employee(
    directory: Directory,
    payload: EmployeeCreateRequest,
) -> EmployeeResponse:
    """Register an employee together with pay terms."""
    employee = await directory.add_employee(
        payload.employee_id,
        payload.first_name,
        payload.last_name,
        payload.compensation.to_profile(),
        status=payload.status,
        **payload.details(),
    )
    return EmployeeResponse.from_employee(employee)


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    directory: Directory,
    employee_id: Annotated[str, Path()],
) -> EmployeeResponse:
    """Employee details, government ids and pay terms."""
    employee = await directory.get_employee(employee_id)
    return EmployeeResponse.from_employee(employee)
