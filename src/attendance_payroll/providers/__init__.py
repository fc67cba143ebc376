"""Compensation-profile and attendance providers."""

from attendance_payroll.providers.base import AttendanceProvider, CompensationProfileProvider
from attendance_payroll.providers.memory import InMemoryEmployeeDirectory
from attendance_payroll.providers.sql import SqlAlchemyEmployeeDirectory

__all__ = [
    "AttendanceProvider",
    "CompensationProfileProvider",
    "InMemoryEmployeeDirectory",
    "SqlAlchemyEmployeeDirectory",
]
