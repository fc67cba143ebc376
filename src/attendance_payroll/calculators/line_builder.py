"""Pay line builder with idempotent hashing."""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal

from attendance_payroll.calculators.statutory import round_to_cents
from attendance_payroll.calculators.types import (
    ZERO,
    DeductionBreakdown,
    LineType,
    PayLine,
)

DEDUCTION_LINES: tuple[tuple[str, str, str], ...] = (
    ("SSS", "social_insurance", "Social insurance contribution"),
    ("PHILHEALTH", "health_insurance", "Health insurance contribution"),
    ("PAGIBIG", "housing_fund", "Housing fund contribution"),
    ("WTAX", "withholding_tax", "Withholding tax"),
)


class PayLineBuilder:
    """Builds pay lines with deterministic hashing for idempotency.

    Sign conventions:
    - EARNING: positive
    - DEDUCTION: negative

    Order is part of the breakdown contract: earnings (regular, overtime,
    allowances) first, then the four statutory deductions in a fixed order.
    """

    @staticmethod
    def compute_line_hash(line: PayLine) -> str:
        """Compute deterministic hash for a pay line."""
        canonical = line.to_canonical_dict()
        json_str = json.dumps(canonical, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    @staticmethod
    def create_earning_line(
        code: str,
        amount: Decimal,
        quantity: Decimal | None = None,
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> PayLine:
        """Create an earning line (positive amount)."""
        return PayLine(
            line_type=LineType.EARNING,
            code=code,
            amount=round_to_cents(abs(amount)),
            quantity=quantity,
            rate=rate,
            explanation=explanation,
        )

    @staticmethod
    def create_deduction_line(
        code: str,
        amount: Decimal,
        explanation: str | None = None,
    ) -> PayLine:
        """Create a deduction line (negative amount)."""
        return PayLine(
            line_type=LineType.DEDUCTION,
            code=code,
            amount=ZERO - round_to_cents(abs(amount)),  # avoids Decimal("-0.00")
            explanation=explanation,
        )

    @classmethod
    def deduction_lines(cls, deductions: DeductionBreakdown) -> list[PayLine]:
        """One line per statutory deduction, zero amounts included."""
        amounts = deductions.as_dict()
        return [
            cls.create_deduction_line(code, amounts[field_name], explanation)
            for code, field_name, explanation in DEDUCTION_LINES
        ]

    @staticmethod
    def calculate_gross_from_lines(lines: list[PayLine]) -> Decimal:
        """Sum earning lines."""
        return sum(
            (line.amount for line in lines if line.line_type == LineType.EARNING),
            ZERO,
        )

    @staticmethod
    def calculate_net_from_lines(lines: list[PayLine]) -> Decimal:
        """Net is the signed sum of all lines."""
        return sum((line.amount for line in lines), ZERO)

    @staticmethod
    def validate_line_signs(lines: list[PayLine]) -> list[str]:
        """Return sign-convention violations, empty when all lines conform."""
        errors: list[str] = []
        for line in lines:
            if line.line_type == LineType.EARNING and line.amount < 0:
                errors.append(f"Earning line {line.code} has negative amount: {line.amount}")
            elif line.line_type == LineType.DEDUCTION and line.amount > 0:
                errors.append(f"Deduction line {line.code} has positive amount: {line.amount}")
        return errors
