"""Business services."""

from attendance_payroll.services.payroll_service import BatchPayrollResult, PayrollService

__all__ = [
    "BatchPayrollResult",
    "PayrollService",
]
