"""Provider protocols for compensation profiles and attendance records.

The payroll service depends only on these protocols; storage adapters
implement them.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from attendance_payroll.calculators.types import AttendanceRecord, CompensationProfile


class CompensationProfileProvider(Protocol):
    """Looks up an employee's compensation profile."""

    async def get_profile(self, employee_id: str) -> CompensationProfile:
        """Return the profile.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        ...


class AttendanceProvider(Protocol):
    """Looks up an employee's attendance records for a date range."""

    async def get_records(
        self, employee_id: str, period_start: date, period_end: date
    ) -> list[AttendanceRecord]:
        """Return date-ordered records in the inclusive range (possibly empty)."""
        ...
