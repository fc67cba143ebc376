"""Pytest fixtures for attendance payroll tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import HealthCheck, settings

from attendance_payroll.calculators.attendance import AttendanceAggregator
from attendance_payroll.calculators.engine import PayrollCalculator
from attendance_payroll.calculators.statutory import StatutorySchedule, default_schedule
from attendance_payroll.calculators.types import (
    CompensationProfile,
    PeriodTotals,
)
from attendance_payroll.config import get_settings, get_statutory_schedule

# isolated_settings is autouse and function-scoped
settings.register_profile(
    "attendance_payroll",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("attendance_payroll")

# Monday .. Sunday
WEEK_START = date(2024, 1, 8)
WEEK_END = date(2024, 1, 14)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Each test reads settings fresh from a clean environment."""
    for name in (
        "DATABASE_URL",
        "ENGINE_VERSION",
        "DAILY_STANDARD_HOURS",
        "OVERTIME_MULTIPLIER",
        "STATUTORY_SCHEDULE_PATH",
        "LOG_LEVEL",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_statutory_schedule.cache_clear()
    yield
    get_settings.cache_clear()
    get_statutory_schedule.cache_clear()


@pytest.fixture
def schedule() -> StatutorySchedule:
    """Built-in statutory schedule."""
    return default_schedule()


@pytest.fixture
def calculator(schedule: StatutorySchedule) -> PayrollCalculator:
    """Calculator with explicit configuration (no settings lookup)."""
    return PayrollCalculator(
        schedule=schedule,
        overtime_multiplier=Decimal("1.25"),
        engine_version="1.0.0",
    )


@pytest.fixture
def aggregator() -> AttendanceAggregator:
    return AttendanceAggregator(daily_standard_hours=Decimal("8"))


@pytest.fixture
def profile() -> CompensationProfile:
    """Hourly rate 100, no allowances."""
    return CompensationProfile(hourly_rate=Decimal("100"))


@pytest.fixture
def week_totals() -> PeriodTotals:
    """40 regular + 5 overtime hours."""
    return PeriodTotals(
        period_start=WEEK_START,
        period_end=WEEK_END,
        total_regular_hours=Decimal("40"),
        total_overtime_hours=Decimal("5"),
        days_worked=5,
        employee_id="E001",
    )

