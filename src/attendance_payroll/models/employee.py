"""Employee, compensation and attendance models."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from attendance_payroll.calculators.types import AttendanceRecord, CompensationProfile
from attendance_payroll.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """Employee identity; owns exactly one compensation profile."""

    __tablename__ = "employee"

    employee_id: Mapped[str] = mapped_column(String, primary_key=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="regular")
    supervisor: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    birthday: Mapped[date | None] = mapped_column(nullable=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)

    # Government identifiers
    sss_number: Mapped[str | None] = mapped_column(String, nullable=True)
    philhealth_number: Mapped[str | None] = mapped_column(String, nullable=True)
    pagibig_number: Mapped[str | None] = mapped_column(String, nullable=True)
    tin: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('regular', 'probationary', 'terminated')",
            name="employee_status_check",
        ),
    )

    # Relationships
    compensation: Mapped[CompensationProfileRecord | None] = relationship(
        back_populates="employee",
        uselist=False,
        cascade="all, delete-orphan",
    )
    attendance: Mapped[list[AttendanceEntry]] = relationship(
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="AttendanceEntry.work_date",
    )

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"


class CompensationProfileRecord(Base, TimestampMixin):
    """Stored pay terms for an employee.

    The rate keeps four decimal places and allowances keep two; the
    directory rejects values with more precision before writing.
    """

    __tablename__ = "compensation_profile"

    compensation_profile_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    employee_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    rice_subsidy: Mapped[Decimal] = mapped_column(nullable=False, default=0)
    phone_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=0)
    clothing_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "rice_subsidy >= 0 AND phone_allowance >= 0 AND clothing_allowance >= 0",
            name="compensation_allowances_nonnegative",
        ),
    )

    employee: Mapped[Employee] = relationship(back_populates="compensation")

    def to_profile(self) -> CompensationProfile:
        """Convert to the immutable profile used by the calculator."""
        return CompensationProfile(
            hourly_rate=Decimal(str(self.hourly_rate)),
            rice_subsidy=Decimal(str(self.rice_subsidy)),
            phone_allowance=Decimal(str(self.phone_allowance)),
            clothing_allowance=Decimal(str(self.clothing_allowance)),
        )


class AttendanceEntry(Base, TimestampMixin):
    """Login/logout times for one employee on one day."""

    __tablename__ = "attendance_entry"

    attendance_entry_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    employee_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    work_date: Mapped[date] = mapped_column(nullable=False)
    login_time: Mapped[time | None] = mapped_column(nullable=True)
    logout_time: Mapped[time | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "work_date", name="attendance_employee_date_unique"),
    )

    employee: Mapped[Employee] = relationship(back_populates="attendance")

    def to_record(self) -> AttendanceRecord:
        """Convert to the immutable record used by the aggregator."""
        return AttendanceRecord(
            work_date=self.work_date,
            login_time=self.login_time,
            logout_time=self.logout_time,
            employee_id=self.employee_id,
        )
