"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from attendance_payroll.calculators.types import (
    CompensationProfile,
    DeductionBreakdown,
    PayrollResult,
    PeriodTotals,
)
from attendance_payroll.models import Employee
from attendance_payroll.providers.sql import EMPLOYEE_DETAIL_FIELDS


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str
    code: str | None = None


# ============================================================================
# Contributions
# ============================================================================


class ContributionLineResponse(BaseModel):
    """A single statutory deduction for a gross pay amount."""

    kind: str
    gross_pay: Decimal
    amount: Decimal


class DeductionBreakdownResponse(BaseModel):
    """All four statutory deductions and their sum."""

    model_config = ConfigDict(from_attributes=True)

    social_insurance: Decimal
    health_insurance: Decimal
    housing_fund: Decimal
    withholding_tax: Decimal
    total: Decimal

    @classmethod
    def from_breakdown(cls, breakdown: DeductionBreakdown) -> DeductionBreakdownResponse:
        return cls(**breakdown.as_dict(), total=breakdown.total)


class ContributionsResponse(BaseModel):
    """Contributions lookup response."""

    gross_pay: Decimal
    deductions: DeductionBreakdownResponse
    schedule: str


# ============================================================================
# Payroll
# ============================================================================


class CompensationProfileIn(BaseModel):
    """Compensation terms supplied with a preview request."""

    hourly_rate: Decimal
    rice_subsidy: Decimal = Decimal("0")
    phone_allowance: Decimal = Decimal("0")
    clothing_allowance: Decimal = Decimal("0")

    def to_profile(self) -> CompensationProfile:
        return CompensationProfile(
            hourly_rate=self.hourly_rate,
            rice_subsidy=self.rice_subsidy,
            phone_allowance=self.phone_allowance,
            clothing_allowance=self.clothing_allowance,
        )


class PayrollPreviewRequest(BaseModel):
    """Pure payroll computation from a profile and aggregated hours."""

    employee_id: str | None = None
    period_start: date
    period_end: date
    regular_hours: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    profile: CompensationProfileIn

    def to_totals(self) -> PeriodTotals:
        return PeriodTotals(
            period_start=self.period_start,
            period_end=self.period_end,
            total_regular_hours=self.regular_hours,
            total_overtime_hours=self.overtime_hours,
            employee_id=self.employee_id,
        )


class PayLineResponse(BaseModel):
    """Pay line in a payroll breakdown."""

    model_config = ConfigDict(from_attributes=True)

    line_type: str
    code: str
    amount: Decimal
    quantity: Decimal | None = None
    rate: Decimal | None = None
    explanation: str | None = None


class PayrollResultResponse(BaseModel):
    """Payroll result for one employee and period."""

    employee_id: str | None
    period_start: date
    period_end: date
    regular_hours: Decimal
    overtime_hours: Decimal
    hours_source: str
    gross_pay: Decimal
    deductions: DeductionBreakdownResponse
    net_pay: Decimal
    calculation_id: UUID
    schedule_fingerprint: str
    lines: list[PayLineResponse]

    @classmethod
    def from_result(cls, result: PayrollResult) -> PayrollResultResponse:
        return cls(
            employee_id=result.employee_id,
            period_start=result.period_start,
            period_end=result.period_end,
            regular_hours=result.regular_hours,
            overtime_hours=result.overtime_hours,
            hours_source=result.hours_source,
            gross_pay=result.gross_pay,
            deductions=DeductionBreakdownResponse.from_breakdown(result.deductions),
            net_pay=result.net_pay,
            calculation_id=result.calculation_id,
            schedule_fingerprint=result.schedule_fingerprint,
            lines=[
                PayLineResponse(
                    line_type=line.line_type.value,
                    code=line.code,
                    amount=line.amount,
                    quantity=line.quantity,
                    rate=line.rate,
                    explanation=line.explanation,
                )
                for line in result.lines
            ],
        )


# ============================================================================
# Attendance
# ============================================================================


class AttendanceEventRequest(BaseModel):
    """A login or logout time for one day."""

    work_date: date
    at: time = Field(description="Time of day (HH:MM[:SS])")

    @field_validator("at")
    @classmethod
    def validate_local_time(cls, v: time) -> time:
        if v.tzinfo is not None:
            raise ValueError("time must be local, without a UTC offset")
        return v


class AttendanceRecordResponse(BaseModel):
    """Stored attendance for one day."""

    employee_id: str
    work_date: date
    login_time: time | None = None
    logout_time: time | None = None
    hours: Decimal


class AttendanceListResponse(BaseModel):
    """Recorded attendance for an employee over a date range."""

    employee_id: str
    period_start: date
    period_end: date
    records: list[AttendanceRecordResponse]
    total_hours: Decimal


# ============================================================================
# Employees
# ============================================================================


EmployeeStatus = Literal["regular", "probationary", "terminated"]


class EmployeeCreateRequest(BaseModel):
    """Register an employee with pay terms."""

    employee_id: str = Field(min_length=1)
    first_name: str
    last_name: str
    status: EmployeeStatus = "regular"
    position: str | None = None
    supervisor: str | None = None
    department: str | None = None
    birthday: date | None = None
    address: str | None = None
    phone_number: str | None = None
    sss_number: str | None = None
    philhealth_number: str | None = None
    pagibig_number: str | None = None
    tin: str | None = None
    compensation: CompensationProfileIn

    def details(self) -> dict[str, object]:
        """Optional identity and government-id fields."""
        return self.model_dump(
            exclude={"employee_id", "first_name", "last_name", "status", "compensation"}
        )


class EmployeeResponse(BaseModel):
    """Employee identity and pay terms."""

    employee_id: str
    first_name: str
    last_name: str
    full_name: str
    status: str
    position: str | None = None
    supervisor: str | None = None
    department: str | None = None
    birthday: date | None = None
    address: str | None = None
    phone_number: str | None = None
    sss_number: str | None = None
    philhealth_number: str | None = None
    pagibig_number: str | None = None
    tin: str | None = None
    compensation: CompensationProfileIn | None = None

    @classmethod
    def from_employee(cls, employee: Employee) -> EmployeeResponse:
        compensation = None
        if employee.compensation is not None:
            profile = employee.compensation.to_profile()
            compensation = CompensationProfileIn(
                hourly_rate=profile.hourly_rate,
                rice_subsidy=profile.rice_subsidy,
                phone_allowance=profile.phone_allowance,
                clothing_allowance=profile.clothing_allowance,
            )
        return cls(
            employee_id=employee.employee_id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            full_name=employee.full_name,
            status=employee.status,
            **{name: getattr(employee, name) for name in EMPLOYEE_DETAIL_FIELDS},
            compensation=compensation,
        )
