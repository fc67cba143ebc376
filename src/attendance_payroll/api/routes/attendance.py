"""Attendance recording and lookup endpoints."""

from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from attendance_payroll.api.dependencies import Directory
from attendance_payroll.api.schemas import (
    AttendanceEventRequest,
    AttendanceListResponse,
    AttendanceRecordResponse,
    ErrorResponse,
)
from attendance_payroll.calculators.attendance import daily_hours
from attendance_payroll.calculators.types import AttendanceRecord

router = APIRouter(prefix="/employees/{employee_id}/attendance", tags=["attendance"])


def _to_response(employee_id: str, record: AttendanceRecord) -> AttendanceRecordResponse:
    return AttendanceRecordResponse(
        employee_id=employee_id,
        work_date=record.work_date,
        login_time=record.login_time,
        logout_time=record.logout_time,
        hours=daily_hours(record),
    )


@router.post(
    "/login",
    response_model=AttendanceRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def record_login(
    directory: Directory,
    employee_id: Annotated[str, Path()],
    payload: AttendanceEventRequest,
) -> AttendanceRecordResponse:
    """Record (or overwrite) the login time for a day."""
    record = await directory.record_login(employee_id, payload.work_date, payload.at)
    return _to_response(employee_id, record)


@router.post(
    "/logout",
    response_model=AttendanceRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def record_logout(
    directory: Directory,
    employee_id: Annotated[str, Path()],
    payload: AttendanceEventRequest,
) -> AttendanceRecordResponse:
    """Record (or overwrite) the logout time for a day."""
    record = await directory.record_logout(employee_id, payload.work_date, payload.at)
    return _to_response(employee_id, record)


@router.get(
    "",
    response_model=AttendanceListResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def list_attendance(
    directory: Directory,
    employee_id: Annotated[str, Path()],
    period_start: Annotated[date, Query()],
    period_end: Annotated[date, Query()],
) -> AttendanceListResponse:
    """Recorded days in an inclusive date range, with worked hours per day."""
    records = await directory.get_records(employee_id, period_start, period_end)
    days = [_to_response(employee_id, record) for record in records]
    return AttendanceListResponse(
        employee_id=employee_id,
        period_start=period_start,
        period_end=period_end,
        records=days,
        total_hours=sum((day.hours for day in days), Decimal("0")),
    )
