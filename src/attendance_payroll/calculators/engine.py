"""Payroll calculator - gross, statutory deductions, net."""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from typing import Any
from uuid import UUID

from attendance_payroll.calculators.line_builder import PayLineBuilder
from attendance_payroll.calculators.statutory import (
    StatutorySchedule,
    compute_deductions,
    round_to_cents,
)
from attendance_payroll.calculators.types import (
    ZERO,
    CompensationProfile,
    Number,
    PayLine,
    PayrollResult,
    PeriodTotals,
    as_decimal,
)
from attendance_payroll.exceptions import ConfigurationError, InvalidInputError


class PayrollCalculator:
    """Computes one employee's pay for one period.

    Calculation pipeline:
    1) Validate profile and hours
    2) Build earning lines (regular, overtime, allowances) -> gross
    3) Look up the four statutory deductions from gross, independently
    4) Net = gross - total deductions (may be negative, never clamped)

    The calculator holds only immutable configuration, so one instance can
    be shared across threads and batch workers.
    """

    def __init__(
        self,
        schedule: StatutorySchedule | None = None,
        overtime_multiplier: Number | None = None,
        engine_version: str | None = None,
    ):
        if schedule is None or overtime_multiplier is None or engine_version is None:
            from attendance_payroll.config import get_settings, get_statutory_schedule

            settings = get_settings()
            if schedule is None:
                schedule = get_statutory_schedule()
            if overtime_multiplier is None:
                overtime_multiplier = settings.overtime_multiplier
            if engine_version is None:
                engine_version = settings.engine_version

        multiplier = as_decimal(overtime_multiplier, "overtime_multiplier")
        if not multiplier.is_finite() or multiplier <= 0:
            raise ConfigurationError(
                f"overtime multiplier must be positive, got {overtime_multiplier!r}"
            )

        self.schedule = schedule
        self.overtime_multiplier = multiplier
        self.engine_version = engine_version
        self.schedule_fingerprint = schedule.fingerprint()

    def compute_payroll(
        self,
        profile: CompensationProfile,
        totals: PeriodTotals,
        employee_id: str | None = None,
    ) -> PayrollResult:
        """Compute gross, deductions and net for one (profile, totals) pair."""
        self._validate_profile(profile)
        self._validate_totals(totals)

        earning_lines = self._build_earning_lines(profile, totals)
        gross = PayLineBuilder.calculate_gross_from_lines(earning_lines)

        deductions = compute_deductions(gross, self.schedule)
        deduction_lines = PayLineBuilder.deduction_lines(deductions)

        net = gross - deductions.total
        lines = tuple(earning_lines + deduction_lines)

        resolved_employee_id = employee_id if employee_id is not None else totals.employee_id
        calculation_id = self._generate_calculation_id(
            resolved_employee_id,
            totals,
            self._compute_inputs_fingerprint(profile, totals),
        )

        return PayrollResult(
            employee_id=resolved_employee_id,
            period_start=totals.period_start,
            period_end=totals.period_end,
            gross_pay=gross,
            deductions=deductions,
            net_pay=net,
            regular_hours=totals.total_regular_hours,
            overtime_hours=totals.total_overtime_hours,
            hours_source=totals.hours_source,
            calculation_id=calculation_id,
            schedule_fingerprint=self.schedule_fingerprint,
            lines=lines,
        )

    def compute_gross_pay(self, profile: CompensationProfile, totals: PeriodTotals) -> Decimal:
        """Gross pay alone, for callers that only need the earnings side."""
        self._validate_profile(profile)
        self._validate_totals(totals)
        return PayLineBuilder.calculate_gross_from_lines(
            self._build_earning_lines(profile, totals)
        )

    def _build_earning_lines(
        self, profile: CompensationProfile, totals: PeriodTotals
    ) -> list[PayLine]:
        rate = profile.hourly_rate
        overtime_rate = rate * self.overtime_multiplier
        lines: list[PayLine] = []

        # Round the hourly total once; overtime takes the remainder
        hourly_amount = round_to_cents(
            totals.total_regular_hours * rate + totals.total_overtime_hours * overtime_rate
        )
        regular_amount = round_to_cents(totals.total_regular_hours * rate)
        overtime_amount = hourly_amount - regular_amount

        if regular_amount > 0:
            lines.append(
                PayLineBuilder.create_earning_line(
                    "REGULAR",
                    regular_amount,
                    quantity=totals.total_regular_hours,
                    rate=rate,
                    explanation=f"Regular: {totals.total_regular_hours} @ {rate}",
                )
            )
        if overtime_amount > 0:
            lines.append(
                PayLineBuilder.create_earning_line(
                    "OVERTIME",
                    overtime_amount,
                    quantity=totals.total_overtime_hours,
                    rate=overtime_rate,
                    explanation=f"Overtime: {totals.total_overtime_hours} @ {overtime_rate}",
                )
            )

        for code, amount, explanation in (
            ("RICE", profile.rice_subsidy, "Rice subsidy"),
            ("PHONE", profile.phone_allowance, "Phone allowance"),
            ("CLOTHING", profile.clothing_allowance, "Clothing allowance"),
        ):
            if amount > 0:
                lines.append(PayLineBuilder.create_earning_line(code, amount, explanation=explanation))

        return lines

    @staticmethod
    def _validate_profile(profile: CompensationProfile) -> None:
        rate = profile.hourly_rate
        if not rate.is_finite() or rate <= 0:
            raise ConfigurationError(f"hourly rate must be positive, got {rate}")
        for name in ("rice_subsidy", "phone_allowance", "clothing_allowance"):
            value: Decimal = getattr(profile, name)
            if not value.is_finite() or value < 0:
                raise ConfigurationError(f"{name} must not be negative, got {value}")

    @staticmethod
    def _validate_totals(totals: PeriodTotals) -> None:
        if totals.period_end < totals.period_start:
            raise InvalidInputError(
                f"period_end {totals.period_end} is before period_start {totals.period_start}"
            )
        for name in ("total_regular_hours", "total_overtime_hours"):
            value: Decimal = getattr(totals, name)
            if not value.is_finite() or value < ZERO:
                raise InvalidInputError(f"{name} must not be negative, got {value}")

    def _compute_inputs_fingerprint(
        self, profile: CompensationProfile, totals: PeriodTotals
    ) -> str:
        """Compute fingerprint of all inputs used in calculation."""
        data: dict[str, Any] = {
            "hourly_rate": str(profile.hourly_rate),
            "rice_subsidy": str(profile.rice_subsidy),
            "phone_allowance": str(profile.phone_allowance),
            "clothing_allowance": str(profile.clothing_allowance),
            "regular_hours": str(totals.total_regular_hours),
            "overtime_hours": str(totals.total_overtime_hours),
            "hours_source": totals.hours_source,
        }
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    def _generate_calculation_id(
        self,
        employee_id: str | None,
        totals: PeriodTotals,
        inputs_fingerprint: str,
    ) -> UUID:
        """Generate deterministic calculation ID."""
        data = {
            "employee_id": employee_id,
            "period_start": totals.period_start.isoformat(),
            "period_end": totals.period_end.isoformat(),
            "engine_version": self.engine_version,
            "overtime_multiplier": str(self.overtime_multiplier),
            "inputs_fingerprint": inputs_fingerprint,
            "schedule_fingerprint": self.schedule_fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])


def compute_payroll(
    profile: CompensationProfile,
    totals: PeriodTotals,
    employee_id: str | None = None,
) -> PayrollResult:
    """Compute payroll with the configured schedule and overtime policy."""
    return PayrollCalculator().compute_payroll(profile, totals, employee_id=employee_id)
