"""SQLAlchemy ORM models for the employee and attendance store."""

from attendance_payroll.models.base import Base, TimestampMixin
from attendance_payroll.models.employee import (
    AttendanceEntry,
    CompensationProfileRecord,
    Employee,
)

__all__ = [
    "AttendanceEntry",
    "Base",
    "CompensationProfileRecord",
    "Employee",
    "TimestampMixin",
]
