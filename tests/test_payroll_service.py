"""Tests for PayrollService over the in-memory directory."""

import logging
from datetime import date, time
from decimal import Decimal

import pytest

from attendance_payroll.calculators.types import CompensationProfile
from attendance_payroll.exceptions import DuplicateEmployeeError, EmployeeNotFoundError
from attendance_payroll.providers.memory import InMemoryEmployeeDirectory
from attendance_payroll.services.payroll_service import PayrollService

pytestmark = pytest.mark.asyncio

START = date(2024, 1, 8)
END = date(2024, 1, 14)


@pytest.fixture
def directory() -> InMemoryEmployeeDirectory:
    directory = InMemoryEmployeeDirectory()
    directory.add_employee("E001", CompensationProfile(hourly_rate=Decimal("100")))
    directory.add_employee("E002", CompensationProfile(hourly_rate=Decimal("150")))
    directory.add_employee("E003", CompensationProfile(hourly_rate=Decimal("0")))
    for offset in range(5):
        day = date.fromordinal(START.toordinal() + offset)
        directory.record_login("E001", day, time(8, 0))
        directory.record_logout("E001", day, time(17, 0))
    return directory


@pytest.fixture
def service(directory, calculator, aggregator) -> PayrollService:
    return PayrollService(
        profiles=directory,
        attendance=directory,
        calculator=calculator,
        aggregator=aggregator,
    )


class TestRunPayroll:
    async def test_attendance_based_payroll(self, service):
        """Five 08:00-17:00 days at rate 100."""
        result = await service.run_payroll("E001", START, END)

        assert result.regular_hours == Decimal("40.00")
        assert result.overtime_hours == Decimal("5.00")
        assert result.gross_pay == Decimal("4625.00")
        assert result.net_pay == Decimal("4167.50")
        assert result.hours_source == "attendance"

    async def test_unknown_employee(self, service):
        with pytest.raises(EmployeeNotFoundError) as exc_info:
            await service.run_payroll("NOPE", START, END)

        assert exc_info.value.employee_id == "NOPE"

    async def test_no_attendance_without_estimate(self, service):
        result = await service.run_payroll("E002", START, END)

        assert result.gross_pay == Decimal("0")
        assert not result.is_estimated

    async def test_no_attendance_with_estimate(self, service, caplog):
        """Degraded mode pays the weekday schedule and says so."""
        with caplog.at_level(logging.INFO, logger="attendance_payroll.services.payroll_service"):
            result = await service.run_payroll("E002", START, END, allow_estimate=True)

        assert result.is_estimated
        assert result.regular_hours == Decimal("40.00")
        assert result.gross_pay == Decimal("6000.00")
        assert "estimated schedule" in caplog.text

    async def test_estimate_not_used_when_hours_exist(self, service):
        result = await service.run_payroll("E001", START, END, allow_estimate=True)

        assert not result.is_estimated

    async def test_profile_update_applies(self, service, directory):
        directory.update_profile("E001", CompensationProfile(hourly_rate=Decimal("200")))

        result = await service.run_payroll("E001", START, END)

        assert result.gross_pay == Decimal("9250.00")

    async def test_duplicate_employee_rejected(self, service, directory):
        with pytest.raises(DuplicateEmployeeError):
            directory.add_employee("E001", CompensationProfile(hourly_rate=Decimal("999")))

        assert (await service.run_payroll("E001", START, END)).gross_pay == Decimal("4625.00")


class TestRunBatch:
    async def test_errors_do_not_stop_batch(self, service, caplog):
        with caplog.at_level(logging.WARNING):
            batch = await service.run_batch(["E001", "E003", "NOPE", "E002"], START, END)

        assert set(batch.results) == {"E001", "E002"}
        assert set(batch.errors) == {"E003", "NOPE"}
        assert batch.error_count == 2
        assert not batch.success
        assert "E003" in caplog.text

    async def test_totals(self, service):
        batch = await service.run_batch(["E001", "E002"], START, END, allow_estimate=True)

        assert batch.success
        assert batch.total_gross == Decimal("10625.00")
        assert batch.total_net == sum(r.net_pay for r in batch.results.values())

    async def test_repeated_ids_counted_once(self, service):
        batch = await service.run_batch(["E001", "E001", "E002", "E001"], START, END)

        assert list(batch.results) == ["E001", "E002"]
        assert batch.total_gross == sum(r.gross_pay for r in batch.results.values())
        assert batch.total_gross == Decimal("4625.00")

    async def test_empty_batch(self, service):
        batch = await service.run_batch([], START, END)

        assert batch.success
        assert batch.total_gross == Decimal("0")
