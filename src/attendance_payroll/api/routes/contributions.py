"""Statutory contribution lookup endpoints."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Path, Query

from attendance_payroll.api.dependencies import Schedule
from attendance_payroll.api.schemas import (
    ContributionLineResponse,
    ContributionsResponse,
    DeductionBreakdownResponse,
    ErrorResponse,
)
from attendance_payroll.calculators.statutory import (
    CONTRIBUTIONS,
    compute_deductions,
    validate_gross_pay,
)
from attendance_payroll.exceptions import UnknownContributionError

router = APIRouter(prefix="/contributions", tags=["contributions"])


@router.get(
    "",
    response_model=ContributionsResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_contributions(
    schedule: Schedule,
    gross_pay: Annotated[Decimal, Query()],
) -> ContributionsResponse:
    """All four statutory deductions for a gross pay amount."""
    gross = validate_gross_pay(gross_pay)
    breakdown = compute_deductions(gross, schedule)
    return ContributionsResponse(
        gross_pay=gross,
        deductions=DeductionBreakdownResponse.from_breakdown(breakdown),
        schedule=schedule.name,
    )


@router.get(
    "/{kind}",
    response_model=ContributionLineResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_contribution(
    schedule: Schedule,
    kind: Annotated[str, Path()],
    gross_pay: Annotated[Decimal, Query()],
) -> ContributionLineResponse:
    """One statutory deduction (social_insurance, health_insurance, housing_fund, withholding_tax)."""
    contribution = CONTRIBUTIONS.get(kind)
    if contribution is None:
        raise UnknownContributionError(kind)
    gross = validate_gross_pay(gross_pay)
    return ContributionLineResponse(
        kind=kind,
        gross_pay=gross,
        amount=contribution(gross, schedule),
    )
