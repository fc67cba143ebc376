"""Payroll computation endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query

from attendance_payroll.api.dependencies import Calculator, Payroll
from attendance_payroll.api.schemas import (
    ErrorResponse,
    PayrollPreviewRequest,
    PayrollResultResponse,
)

router = APIRouter(tags=["payroll"])


@router.post(
    "/payroll/preview",
    response_model=PayrollResultResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def preview_payroll(
    calculator: Calculator,
    payload: PayrollPreviewRequest,
) -> PayrollResultResponse:
    """Compute payroll from supplied hours without touching stored data.

    Deterministic: the same request always yields the same calculation_id.
    """
    result = calculator.compute_payroll(
        payload.profile.to_profile(),
        payload.to_totals(),
        employee_id=payload.employee_id,
    )
    return PayrollResultResponse.from_result(result)


@router.get(
    "/employees/{employee_id}/payroll",
    response_model=PayrollResultResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def get_employee_payroll(
    service: Payroll,
    employee_id: Annotated[str, Path()],
    period_start: Annotated[date, Query()],
    period_end: Annotated[date, Query()],
    estimate: Annotated[bool, Query()] = False,
) -> PayrollResultResponse:
    """Compute payroll for a stored employee from recorded attendance.

    With estimate=true, a period with no recorded hours is paid on the
    standard weekday schedule and the result is marked as estimated.
    """
    result = await service.run_payroll(
        employee_id, period_start, period_end, allow_estimate=estimate
    )
    return PayrollResultResponse.from_result(result)
