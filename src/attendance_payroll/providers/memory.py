"""In-memory employee directory."""

from __future__ import annotations

from datetime import date, time

from attendance_payroll.calculators.attendance import AttendanceLog
from attendance_payroll.calculators.types import AttendanceRecord, CompensationProfile
from attendance_payroll.exceptions import DuplicateEmployeeError, EmployeeNotFoundError


class InMemoryEmployeeDirectory:
    """Profiles and attendance held in process memory.

    Implements both CompensationProfileProvider and AttendanceProvider.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, CompensationProfile] = {}
        self._logs: dict[str, AttendanceLog] = {}

    def add_employee(self, employee_id: str, profile: CompensationProfile) -> None:
        if employee_id in self._profiles:
            raise DuplicateEmployeeError(employee_id)
        self._profiles[employee_id] = profile
        self._logs[employee_id] = AttendanceLog(employee_id)

    def update_profile(self, employee_id: str, profile: CompensationProfile) -> None:
        self._require(employee_id)
        self._profiles[employee_id] = profile

    def record_login(self, employee_id: str, work_date: date, login_time: time) -> AttendanceRecord:
        self._require(employee_id)
        return self._logs[employee_id].record_login(work_date, login_time)

    def record_logout(
        self, employee_id: str, work_date: date, logout_time: time
    ) -> AttendanceRecord:
        self._require(employee_id)
        return self._logs[employee_id].record_logout(work_date, logout_time)

    async def get_profile(self, employee_id: str) -> CompensationProfile:
        self._require(employee_id)
        return self._profiles[employee_id]

    async def get_records(
        self, employee_id: str, period_start: date, period_end: date
    ) -> list[AttendanceRecord]:
        self._require(employee_id)
        return self._logs[employee_id].records(period_start, period_end)

    def _require(self, employee_id: str) -> None:
        if employee_id not in self._profiles:
            raise EmployeeNotFoundError(employee_id)
