"""SQLAlchemy-backed employee directory."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendance_payroll.calculators.types import (
    AttendanceRecord,
    CompensationProfile,
    check_local_time,
)
from attendance_payroll.exceptions import (
    DuplicateEmployeeError,
    EmployeeNotFoundError,
    InvalidInputError,
)
from attendance_payroll.models import AttendanceEntry, CompensationProfileRecord, Employee

# Decimal places the compensation columns keep
RATE_PLACES = 4
ALLOWANCE_PLACES = 2

EMPLOYEE_DETAIL_FIELDS = (
    "position",
    "supervisor",
    "department",
    "birthday",
    "address",
    "phone_number",
    "sss_number",
    "philhealth_number",
    "pagibig_number",
    "tin",
)


def check_scale(value: Decimal, places: int, name: str) -> None:
    """Reject amounts with more decimal places than the column stores."""
    exponent = value.normalize().as_tuple().exponent
    if isinstance(exponent, int) and -exponent > places:
        raise InvalidInputError(f"{name} allows at most {places} decimal places, got {value}")


class SqlAlchemyEmployeeDirectory:
    """Profiles and attendance stored in the relational database.

    Implements both CompensationProfileProvider and AttendanceProvider.
    Write methods flush but never commit; the session owner commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_employee(self, employee_id: str) -> Employee:
        """Get employee with compensation loaded."""
        result = await self.session.execute(
            select(Employee)
            .where(Employee.employee_id == employee_id)
            .options(selectinload(Employee.compensation))
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def list_employees(self, include_terminated: bool = True) -> list[Employee]:
        """Employees in id order, with compensation loaded."""
        query = (
            select(Employee)
            .options(selectinload(Employee.compensation))
            .order_by(Employee.employee_id)
        )
        if not include_terminated:
            query = query.where(Employee.status != "terminated")
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_employee_ids(self) -> list[str]:
        """All employee ids except terminated ones, in id order."""
        result = await self.session.execute(
            select(Employee.employee_id)
            .where(Employee.status != "terminated")
            .order_by(Employee.employee_id)
        )
        return list(result.scalars().all())

    async def add_employee(
        self,
        employee_id: str,
        first_name: str,
        last_name: str,
        profile: CompensationProfile,
        status: str = "regular",
        **details: Any,
    ) -> Employee:
        """Create an employee together with its compensation profile.

        ``details`` takes the optional identity and government-id fields
        (position, supervisor, department, birthday, address, phone_number,
        sss_number, philhealth_number, pagibig_number, tin).
        """
        unknown = set(details) - set(EMPLOYEE_DETAIL_FIELDS)
        if unknown:
            raise InvalidInputError(f"unknown employee fields: {', '.join(sorted(unknown))}")
        if await self._exists(employee_id):
            raise DuplicateEmployeeError(employee_id)

        employee = Employee(
            employee_id=employee_id,
            first_name=first_name,
            last_name=last_name,
            status=status,
            **details,
        )
        employee.compensation = self._profile_record(employee_id, profile)
        self.session.add(employee)
        await self.session.flush()
        return employee

    async def update_profile(self, employee_id: str, profile: CompensationProfile) -> None:
        """Replace an employee's compensation terms."""
        employee = await self.get_employee(employee_id)
        if employee.compensation is None:
            employee.compensation = self._profile_record(employee_id, profile)
        else:
            self._check_profile(profile)
            record = employee.compensation
            record.hourly_rate = profile.hourly_rate
            record.rice_subsidy = profile.rice_subsidy
            record.phone_allowance = profile.phone_allowance
            record.clothing_allowance = profile.clothing_allowance
        await self.session.flush()

    async def record_login(
        self, employee_id: str, work_date: date, login_time: time
    ) -> AttendanceRecord:
        check_local_time(login_time, "login_time")
        entry = await self._get_or_create_entry(employee_id, work_date)
        entry.login_time = login_time
        await self.session.flush()
        return entry.to_record()

    async def record_logout(
        self, employee_id: str, work_date: date, logout_time: time
    ) -> AttendanceRecord:
        check_local_time(logout_time, "logout_time")
        entry = await self._get_or_create_entry(employee_id, work_date)
        entry.logout_time = logout_time
        await self.session.flush()
        return entry.to_record()

    # === Provider protocol ===

    async def get_profile(self, employee_id: str) -> CompensationProfile:
        employee = await self.get_employee(employee_id)
        if employee.compensation is None:
            # No pay terms: the calculator rejects the zero rate as a configuration error
            return CompensationProfile(hourly_rate=Decimal("0"))
        return employee.compensation.to_profile()

    async def get_records(
        self, employee_id: str, period_start: date, period_end: date
    ) -> list[AttendanceRecord]:
        if period_end < period_start:
            raise InvalidInputError(f"period end {period_end} is before start {period_start}")
        await self._require(employee_id)
        result = await self.session.execute(
            select(AttendanceEntry)
            .where(
                AttendanceEntry.employee_id == employee_id,
                AttendanceEntry.work_date >= period_start,
                AttendanceEntry.work_date <= period_end,
            )
            .order_by(AttendanceEntry.work_date)
        )
        return [entry.to_record() for entry in result.scalars().all()]

    # === Helpers ===

    async def _exists(self, employee_id: str) -> bool:
        found = await self.session.scalar(
            select(Employee.employee_id).where(Employee.employee_id == employee_id)
        )
        return found is not None

    async def _require(self, employee_id: str) -> None:
        if not await self._exists(employee_id):
            raise EmployeeNotFoundError(employee_id)

    async def _get_or_create_entry(self, employee_id: str, work_date: date) -> AttendanceEntry:
        await self._require(employee_id)
        result = await self.session.execute(
            select(AttendanceEntry).where(
                AttendanceEntry.employee_id == employee_id,
                AttendanceEntry.work_date == work_date,
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            entry = AttendanceEntry(employee_id=employee_id, work_date=work_date)
            self.session.add(entry)
        return entry

    @staticmethod
    def _check_profile(profile: CompensationProfile) -> None:
        check_scale(profile.hourly_rate, RATE_PLACES, "hourly_rate")
        for name in ("rice_subsidy", "phone_allowance", "clothing_allowance"):
            check_scale(getattr(profile, name), ALLOWANCE_PLACES, name)

    @classmethod
    def _profile_record(
        cls, employee_id: str, profile: CompensationProfile
    ) -> CompensationProfileRecord:
        cls._check_profile(profile)
        return CompensationProfileRecord(
            employee_id=employee_id,
            hourly_rate=profile.hourly_rate,
            rice_subsidy=profile.rice_subsidy,
            phone_allowance=profile.phone_allowance,
            clothing_allowance=profile.clothing_allowance,
        )
