"""API routes."""

from attendance_payroll.api.routes.attendance import router as attendance_router
from attendance_payroll.api.routes.contributions import router as contributions_router
from attendance_payroll.api.routes.employees import router as employees_router
from attendance_payroll.api.routes.health import router as health_router
from attendance_payroll.api.routes.payroll import router as payroll_router

__all__ = [
    "attendance_router",
    "contributions_router",
    "employees_router",
    "health_router",
    "payroll_router",
]
