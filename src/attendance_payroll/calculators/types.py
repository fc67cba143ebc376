"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Union
from uuid import UUID

from attendance_payroll.exceptions import InvalidInputError

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")

HOURS_SOURCE_ATTENDANCE = "attendance"
HOURS_SOURCE_ESTIMATED = "estimated_schedule"


def as_decimal(value: Number, name: str = "value") -> Decimal:
    """Convert a numeric input to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be numeric, got {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInputError(f"{name} must be numeric, got {value!r}") from None


def check_local_time(value: time | None, name: str = "time") -> time | None:
    """Attendance times are local wall-clock times; a UTC offset is rejected."""
    if value is not None and value.tzinfo is not None:
        raise InvalidInputError(f"{name} must not carry a UTC offset, got {value.isoformat()}")
    return value


class LineType(str, Enum):
    """Pay line types."""

    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"


@dataclass(frozen=True)
class CompensationProfile:
    """Per-employee pay terms.

    Allowances are fixed per-period add-ons and are never prorated by
    attendance. Validation of the rate happens at computation time so that
    a bad profile surfaces as a configuration error of the payroll run.
    """

    hourly_rate: Decimal
    rice_subsidy: Decimal = ZERO
    phone_allowance: Decimal = ZERO
    clothing_allowance: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in ("hourly_rate", "rice_subsidy", "phone_allowance", "clothing_allowance"):
            object.__setattr__(self, name, as_decimal(getattr(self, name), name))

    @property
    def total_allowances(self) -> Decimal:
        return self.rice_subsidy + self.phone_allowance + self.clothing_allowance

    def with_updates(self, **changes: Any) -> CompensationProfile:
        """Return a new profile with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class AttendanceRecord:
    """Login/logout times for one employee on one calendar day."""

    work_date: date
    login_time: time | None = None
    logout_time: time | None = None
    employee_id: str | None = None

    def __post_init__(self) -> None:
        for name in ("login_time", "logout_time"):
            check_local_time(getattr(self, name), name)

    @property
    def is_complete(self) -> bool:
        return self.login_time is not None and self.logout_time is not None

    def with_login(self, login_time: time) -> AttendanceRecord:
        return replace(self, login_time=login_time)

    def with_logout(self, logout_time: time) -> AttendanceRecord:
        return replace(self, logout_time=logout_time)

    def worked_minutes(self) -> int:
        """Whole minutes between login and logout; 0 when incomplete or inverted."""
        if self.login_time is None or self.logout_time is None:
            return 0
        if self.logout_time <= self.login_time:
            return 0
        delta = datetime.combine(self.work_date, self.logout_time) - datetime.combine(
            self.work_date, self.login_time
        )
        return int(delta.total_seconds() // 60)


@dataclass(frozen=True)
class PeriodTotals:
    """Aggregated hours for one employee over an inclusive date range."""

    period_start: date
    period_end: date
    total_regular_hours: Decimal = ZERO
    total_overtime_hours: Decimal = ZERO
    days_worked: int = 0
    employee_id: str | None = None
    hours_source: str = HOURS_SOURCE_ATTENDANCE

    def __post_init__(self) -> None:
        for name in ("total_regular_hours", "total_overtime_hours"):
            object.__setattr__(self, name, as_decimal(getattr(self, name), name))

    @property
    def total_hours(self) -> Decimal:
        return self.total_regular_hours + self.total_overtime_hours

    @property
    def is_estimated(self) -> bool:
        return self.hours_source == HOURS_SOURCE_ESTIMATED


@dataclass(frozen=True)
class DeductionBreakdown:
    """The four statutory deductions for one gross pay amount."""

    social_insurance: Decimal
    health_insurance: Decimal
    housing_fund: Decimal
    withholding_tax: Decimal

    @property
    def total(self) -> Decimal:
        return (
            self.social_insurance
            + self.health_insurance
            + self.housing_fund
            + self.withholding_tax
        )

    def as_dict(self) -> dict[str, Decimal]:
        return {
            "social_insurance": self.social_insurance,
            "health_insurance": self.health_insurance,
            "housing_fund": self.housing_fund,
            "withholding_tax": self.withholding_tax,
        }


@dataclass(frozen=True)
class PayLine:
    """One row of a payroll breakdown (signed per line type)."""

    line_type: LineType
    code: str
    amount: Decimal
    quantity: Decimal | None = None
    rate: Decimal | None = None
    explanation: str | None = None

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "line_type": self.line_type.value,
            "code": self.code,
            "amount": str(self.amount),
            "quantity": str(self.quantity) if self.quantity is not None else None,
            "rate": str(self.rate) if self.rate is not None else None,
        }


@dataclass(frozen=True)
class PayrollResult:
    """Result of computing pay for one employee over one period."""

    employee_id: str | None
    period_start: date
    period_end: date
    gross_pay: Decimal
    deductions: DeductionBreakdown
    net_pay: Decimal
    regular_hours: Decimal
    overtime_hours: Decimal
    hours_source: str
    calculation_id: UUID
    schedule_fingerprint: str
    lines: tuple[PayLine, ...] = field(default_factory=tuple)

    @property
    def total_deductions(self) -> Decimal:
        return self.deductions.total

    @property
    def is_estimated(self) -> bool:
        return self.hours_source == HOURS_SOURCE_ESTIMATED
