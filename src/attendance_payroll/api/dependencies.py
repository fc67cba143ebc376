"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.calculators.engine import PayrollCalculator
from attendance_payroll.calculators.statutory import StatutorySchedule
from attendance_payroll.config import get_statutory_schedule
from attendance_payroll.database import get_session
from attendance_payroll.providers.sql import SqlAlchemyEmployeeDirectory
from attendance_payroll.services.payroll_service import PayrollService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency. Commits when the request succeeds."""
    async with get_session() as session:
        yield session


def get_schedule() -> StatutorySchedule:
    """Statutory schedule in force."""
    return get_statutory_schedule()


DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Schedule = Annotated[StatutorySchedule, Depends(get_schedule)]


def get_directory(db: DbSession) -> SqlAlchemyEmployeeDirectory:
    """Employee directory bound to the request session."""
    return SqlAlchemyEmployeeDirectory(db)


Directory = Annotated[SqlAlchemyEmployeeDirectory, Depends(get_directory)]


def get_calculator(schedule: Schedule) -> PayrollCalculator:
    return PayrollCalculator(schedule=schedule)


Calculator = Annotated[PayrollCalculator, Depends(get_calculator)]


def get_payroll_service(directory: Directory, calculator: Calculator) -> PayrollService:
    """Payroll service reading profiles and attendance from the directory."""
    return PayrollService(profiles=directory, attendance=directory, calculator=calculator)


Payroll = Annotated[PayrollService, Depends(get_payroll_service)]
