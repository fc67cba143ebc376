"""Attendance aggregation into period totals."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

from attendance_payroll.calculators.types import (
    HOURS_SOURCE_ESTIMATED,
    ZERO,
    AttendanceRecord,
    Number,
    PeriodTotals,
    as_decimal,
)
from attendance_payroll.exceptions import ConfigurationError, InvalidInputError

HOURS_PRECISION = Decimal("0.01")
DEFAULT_DAILY_STANDARD_HOURS = Decimal("8.00")


def daily_hours(record: AttendanceRecord) -> Decimal:
    """Hours worked on one day, rounded half-up to 2 decimals.

    Incomplete records and records whose logout is not after login count
    as zero hours.
    """
    minutes = record.worked_minutes()
    if minutes <= 0:
        return ZERO
    return (Decimal(minutes) / Decimal(60)).quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)


def _check_period(period_start: date, period_end: date) -> None:
    if period_end < period_start:
        raise InvalidInputError(
            f"period_end {period_end} is before period_start {period_start}"
        )


class AttendanceLog:
    """Date-ordered attendance for one employee.

    Login and logout may arrive in either order; each call replaces the
    day's record with an updated copy.
    """

    def __init__(self, employee_id: str | None = None):
        self.employee_id = employee_id
        self._records: dict[date, AttendanceRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def record_login(self, work_date: date, login_time: time) -> AttendanceRecord:
        record = self._get_or_new(work_date).with_login(login_time)
        self._records[work_date] = record
        return record

    def record_logout(self, work_date: date, logout_time: time) -> AttendanceRecord:
        record = self._get_or_new(work_date).with_logout(logout_time)
        self._records[work_date] = record
        return record

    def get(self, work_date: date) -> AttendanceRecord | None:
        return self._records.get(work_date)

    def records(
        self, period_start: date | None = None, period_end: date | None = None
    ) -> list[AttendanceRecord]:
        """Records ordered by date, optionally limited to an inclusive range."""
        return [
            self._records[d]
            for d in sorted(self._records)
            if (period_start is None or d >= period_start)
            and (period_end is None or d <= period_end)
        ]

    def _get_or_new(self, work_date: date) -> AttendanceRecord:
        existing = self._records.get(work_date)
        if existing is not None:
            return existing
        return AttendanceRecord(work_date=work_date, employee_id=self.employee_id)


class AttendanceAggregator:
    """Folds daily attendance into regular and overtime hour totals.

    Hours beyond the daily standard on a given day are overtime. Days with
    no record, incomplete records, and records with logout not after login
    all contribute zero; none of them fail the period.
    """

    def __init__(self, daily_standard_hours: Number | None = None):
        if daily_standard_hours is None:
            from attendance_payroll.config import get_settings

            daily_standard_hours = get_settings().daily_standard_hours
        standard = as_decimal(daily_standard_hours, "daily_standard_hours")
        if not standard.is_finite() or standard <= 0:
            raise ConfigurationError(
                f"daily standard hours must be positive, got {daily_standard_hours!r}"
            )
        self.daily_standard_hours = standard

    def split_day(self, hours: Decimal) -> tuple[Decimal, Decimal]:
        """Split one day's hours into (regular, overtime)."""
        regular = min(hours, self.daily_standard_hours)
        overtime = max(ZERO, hours - self.daily_standard_hours)
        return regular, overtime

    def aggregate(
        self,
        records: Iterable[AttendanceRecord],
        period_start: date,
        period_end: date,
        employee_id: str | None = None,
    ) -> PeriodTotals:
        """Sum regular and overtime hours for records in [period_start, period_end]."""
        _check_period(period_start, period_end)

        # One record per date; a later duplicate replaces an earlier one
        by_date: dict[date, AttendanceRecord] = {}
        for record in records:
            if period_start <= record.work_date <= period_end:
                by_date[record.work_date] = record
                if employee_id is None:
                    employee_id = record.employee_id

        total_regular = ZERO
        total_overtime = ZERO
        days_worked = 0

        for work_date in sorted(by_date):
            hours = daily_hours(by_date[work_date])
            if hours <= 0:
                continue
            regular, overtime = self.split_day(hours)
            total_regular += regular
            total_overtime += overtime
            days_worked += 1

        return PeriodTotals(
            period_start=period_start,
            period_end=period_end,
            total_regular_hours=total_regular,
            total_overtime_hours=total_overtime,
            days_worked=days_worked,
            employee_id=employee_id,
        )

    def estimate_scheduled_totals(
        self,
        period_start: date,
        period_end: date,
        employee_id: str | None = None,
    ) -> PeriodTotals:
        """Degraded mode: assume the daily standard on every weekday in range.

        The result is marked ``estimated_schedule`` so it is never mistaken
        for attendance-based totals.
        """
        _check_period(period_start, period_end)

        weekdays = 0
        current = period_start
        while current <= period_end:
            if current.weekday() < 5:
                weekdays += 1
            current += timedelta(days=1)

        return PeriodTotals(
            period_start=period_start,
            period_end=period_end,
            total_regular_hours=self.daily_standard_hours * weekdays,
            total_overtime_hours=ZERO,
            days_worked=weekdays,
            employee_id=employee_id,
            hours_source=HOURS_SOURCE_ESTIMATED,
        )


def aggregate(
    records: Iterable[AttendanceRecord],
    period_start: date,
    period_end: date,
    daily_standard_hours: Number | None = None,
) -> PeriodTotals:
    """Aggregate records with the configured (or given) daily standard."""
    return AttendanceAggregator(daily_standard_hours).aggregate(records, period_start, period_end)
