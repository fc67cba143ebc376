"""Payroll runs over provider-supplied profiles and attendance."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from attendance_payroll.calculators.attendance import AttendanceAggregator
from attendance_payroll.calculators.engine import PayrollCalculator
from attendance_payroll.calculators.types import PayrollResult
from attendance_payroll.exceptions import PayrollError
from attendance_payroll.providers.base import AttendanceProvider, CompensationProfileProvider

logger = logging.getLogger(__name__)


@dataclass
class BatchPayrollResult:
    """Result of running payroll for many employees over one period."""

    period_start: date
    period_end: date
    results: dict[str, PayrollResult] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)  # employee_id -> message
    total_gross: Decimal = Decimal("0")
    total_net: Decimal = Decimal("0")

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def success(self) -> bool:
        return not self.errors


class PayrollService:
    """Runs the payroll pipeline for employees known to the providers.

    Pipeline per employee:
    1) Load compensation profile (unknown employee -> EmployeeNotFoundError)
    2) Load attendance records for the period
    3) Aggregate into period totals
    4) If no hours were recorded and the caller allows it, fall back to the
       estimated schedule (marked as such on the result)
    5) Compute gross, deductions, net
    """

    def __init__(
        self,
        profiles: CompensationProfileProvider,
        attendance: AttendanceProvider,
        calculator: PayrollCalculator | None = None,
        aggregator: AttendanceAggregator | None = None,
    ):
        self.profiles = profiles
        self.attendance = attendance
        self.calculator = calculator or PayrollCalculator()
        self.aggregator = aggregator or AttendanceAggregator()

    async def run_payroll(
        self,
        employee_id: str,
        period_start: date,
        period_end: date,
        allow_estimate: bool = False,
    ) -> PayrollResult:
        """Compute payroll for one employee."""
        profile = await self.profiles.get_profile(employee_id)
        records = await self.attendance.get_records(employee_id, period_start, period_end)

        totals = self.aggregator.aggregate(
            records, period_start, period_end, employee_id=employee_id
        )
        if totals.total_hours == 0 and allow_estimate:
            logger.info(
                "No attendance for employee %s in %s..%s; using estimated schedule",
                employee_id,
                period_start,
                period_end,
            )
            totals = self.aggregator.estimate_scheduled_totals(
                period_start, period_end, employee_id=employee_id
            )

        return self.calculator.compute_payroll(profile, totals, employee_id=employee_id)

    async def run_batch(
        self,
        employee_ids: Iterable[str],
        period_start: date,
        period_end: date,
        allow_estimate: bool = False,
    ) -> BatchPayrollResult:
        """Compute payroll for each employee independently.

        A payroll error for one employee is recorded and logged; it never
        stops the rest of the batch. Repeated ids are computed once.
        """
        batch = BatchPayrollResult(period_start=period_start, period_end=period_end)

        for employee_id in dict.fromkeys(employee_ids):
            try:
                result = await self.run_payroll(
                    employee_id, period_start, period_end, allow_estimate=allow_estimate
                )
            except PayrollError as e:
                logger.warning("Payroll failed for employee %s: %s", employee_id, e.message)
                batch.errors[employee_id] = e.message
                continue

            batch.results[employee_id] = result
            batch.total_gross += result.gross_pay
            batch.total_net += result.net_pay

        logger.info(
            "Payroll batch %s..%s: %d computed, %d failed",
            period_start,
            period_end,
            len(batch.results),
            batch.error_count,
        )
        return batch
