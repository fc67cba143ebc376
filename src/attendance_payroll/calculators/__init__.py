"""Payroll calculation pipeline."""

from attendance_payroll.calculators.attendance import (
    AttendanceAggregator,
    AttendanceLog,
    aggregate,
    daily_hours,
)
from attendance_payroll.calculators.engine import PayrollCalculator, compute_payroll
from attendance_payroll.calculators.line_builder import PayLineBuilder
from attendance_payroll.calculators.statutory import (
    StatutorySchedule,
    compute_deductions,
    default_schedule,
    health_insurance_contribution,
    housing_fund_contribution,
    load_schedule,
    social_insurance_contribution,
    withholding_tax,
)
from attendance_payroll.calculators.types import (
    AttendanceRecord,
    CompensationProfile,
    DeductionBreakdown,
    PayLine,
    PayrollResult,
    PeriodTotals,
)

__all__ = [
    "AttendanceAggregator",
    "AttendanceLog",
    "AttendanceRecord",
    "CompensationProfile",
    "DeductionBreakdown",
    "PayLine",
    "PayLineBuilder",
    "PayrollCalculator",
    "PayrollResult",
    "PeriodTotals",
    "StatutorySchedule",
    "aggregate",
    "compute_deductions",
    "compute_payroll",
    "daily_hours",
    "default_schedule",
    "health_insurance_contribution",
    "housing_fund_contribution",
    "load_schedule",
    "social_insurance_contribution",
    "withholding_tax",
]
