"""Statutory contribution tables driven by a JSON-shaped schedule.

A schedule payload has the structure:
{
    "name": "PH-2023",
    "social_insurance": {
        "steps": [{"max": 3250, "amount": 135.00}, ..., {"max": null, "amount": 630.00}]
    },
    "health_insurance": {"rate": 0.04},
    "housing_fund": {
        "low_threshold": 1000, "high_threshold": 1500,
        "low_rate": 0.01, "high_rate": 0.02, "cap": 100.00
    },
    "withholding_tax": {
        "brackets": [{"min": 0, "base": 0, "rate": 0}, {"min": 20833, "base": 0, "rate": 0.20}, ...]
    }
}

Step tables are upper-bound inclusive with an unbounded last step. Tax
brackets apply to gross pay strictly above their lower bound, so a value
exactly on a boundary stays in the lower bracket.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any

from attendance_payroll.calculators.types import (
    ZERO,
    DeductionBreakdown,
    Number,
    as_decimal,
)
from attendance_payroll.exceptions import ConfigurationError, InvalidInputError

CENTS = Decimal("0.01")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_gross_pay(gross_pay: Number) -> Decimal:
    """Reject negative or non-finite gross pay instead of clamping it."""
    value = as_decimal(gross_pay, "gross_pay")
    if not value.is_finite():
        raise InvalidInputError(f"gross_pay must be finite, got {gross_pay!r}")
    if value < 0:
        raise InvalidInputError(f"gross_pay must not be negative, got {gross_pay!r}")
    return value


@dataclass(frozen=True)
class ContributionStep:
    """Fixed contribution for gross pay up to ``max_amount`` (inclusive)."""

    max_amount: Decimal | None  # None = no upper limit
    amount: Decimal


@dataclass(frozen=True)
class HousingFundPolicy:
    """Banded-rate contribution with an absolute cap.

    Gross strictly below ``low_threshold`` contributes nothing; gross up to
    and including ``high_threshold`` uses ``low_rate``; above it uses
    ``high_rate``. The cap applies in every band.
    """

    low_threshold: Decimal
    high_threshold: Decimal
    low_rate: Decimal
    high_rate: Decimal
    cap: Decimal

    def rate_for(self, gross_pay: Decimal) -> Decimal:
        if gross_pay < self.low_threshold:
            return ZERO
        if gross_pay <= self.high_threshold:
            return self.low_rate
        return self.high_rate


@dataclass(frozen=True)
class TaxBracket:
    """Marginal bracket: base amount plus rate on the excess over min_amount."""

    min_amount: Decimal
    base_amount: Decimal
    rate: Decimal  # As decimal, e.g., 0.20 for 20%


@dataclass(frozen=True)
class StatutorySchedule:
    """The single statutory configuration in effect for a payroll run."""

    name: str
    social_insurance_steps: tuple[ContributionStep, ...]
    health_insurance_rate: Decimal
    housing_fund: HousingFundPolicy
    tax_brackets: tuple[TaxBracket, ...]

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        steps = self.social_insurance_steps
        if not steps:
            raise ConfigurationError("social insurance table has no steps")
        if steps[-1].max_amount is not None:
            raise ConfigurationError("last social insurance step must be unbounded")
        previous: Decimal | None = None
        for step in steps:
            if step.amount < 0:
                raise ConfigurationError(f"negative social insurance amount {step.amount}")
            if step.max_amount is None:
                if step is not steps[-1]:
                    raise ConfigurationError("only the last social insurance step may be unbounded")
                continue
            if step.max_amount < 0 or (previous is not None and step.max_amount <= previous):
                raise ConfigurationError(
                    f"social insurance steps must be sorted and non-overlapping at {step.max_amount}"
                )
            previous = step.max_amount

        if self.health_insurance_rate < 0:
            raise ConfigurationError("health insurance rate must not be negative")

        hf = self.housing_fund
        if hf.low_threshold < 0 or hf.high_threshold < hf.low_threshold:
            raise ConfigurationError("housing fund thresholds must satisfy 0 <= low <= high")
        if hf.low_rate < 0 or hf.high_rate < 0 or hf.cap < 0:
            raise ConfigurationError("housing fund rates and cap must not be negative")

        brackets = self.tax_brackets
        if not brackets:
            raise ConfigurationError("withholding tax table has no brackets")
        if brackets[0].min_amount != 0:
            raise ConfigurationError("first withholding tax bracket must start at 0")
        for lower, upper in zip(brackets, brackets[1:]):
            if upper.min_amount <= lower.min_amount:
                raise ConfigurationError(
                    f"withholding tax brackets must be strictly increasing at {upper.min_amount}"
                )
            if upper.rate < lower.rate:
                raise ConfigurationError(
                    f"withholding tax rates must not decrease at {upper.min_amount}"
                )
        for bracket in brackets:
            if bracket.rate < 0 or bracket.base_amount < 0:
                raise ConfigurationError("withholding tax base and rate must not be negative")

    # === Loading ===

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> StatutorySchedule:
        """Build a schedule from a JSON-shaped payload."""
        try:
            steps = tuple(
                ContributionStep(
                    max_amount=_dec(s["max"]) if s.get("max") is not None else None,
                    amount=_dec(s["amount"]),
                )
                for s in payload["social_insurance"]["steps"]
            )
            hf = payload["housing_fund"]
            housing = HousingFundPolicy(
                low_threshold=_dec(hf["low_threshold"]),
                high_threshold=_dec(hf["high_threshold"]),
                low_rate=_dec(hf["low_rate"]),
                high_rate=_dec(hf["high_rate"]),
                cap=_dec(hf["cap"]),
            )
            brackets = tuple(
                TaxBracket(
                    min_amount=_dec(b["min"]),
                    base_amount=_dec(b.get("base", 0)),
                    rate=_dec(b["rate"]),
                )
                for b in payload["withholding_tax"]["brackets"]
            )
            health_rate = _dec(payload["health_insurance"]["rate"])
        except KeyError as e:
            raise ConfigurationError(f"malformed statutory schedule: missing {e}") from None
        except (AttributeError, TypeError) as e:
            raise ConfigurationError(f"malformed statutory schedule: {e}") from None

        return cls(
            name=str(payload.get("name", "custom")),
            social_insurance_steps=steps,
            health_insurance_rate=health_rate,
            housing_fund=housing,
            tax_brackets=brackets,
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the canonical payload (round-trips through from_payload)."""
        hf = self.housing_fund
        return {
            "name": self.name,
            "social_insurance": {
                "steps": [
                    {
                        "max": str(s.max_amount) if s.max_amount is not None else None,
                        "amount": str(s.amount),
                    }
                    for s in self.social_insurance_steps
                ]
            },
            "health_insurance": {"rate": str(self.health_insurance_rate)},
            "housing_fund": {
                "low_threshold": str(hf.low_threshold),
                "high_threshold": str(hf.high_threshold),
                "low_rate": str(hf.low_rate),
                "high_rate": str(hf.high_rate),
                "cap": str(hf.cap),
            },
            "withholding_tax": {
                "brackets": [
                    {"min": str(b.min_amount), "base": str(b.base_amount), "rate": str(b.rate)}
                    for b in self.tax_brackets
                ]
            },
        }

    def fingerprint(self) -> str:
        """Compute fingerprint of the schedule for audit trails."""
        json_str = json.dumps(self.to_payload(), sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    # === Lookups ===

    def social_insurance_step(self, gross_pay: Decimal) -> ContributionStep:
        for step in self.social_insurance_steps:
            if step.max_amount is None or gross_pay <= step.max_amount:
                return step
        # Unreachable: validation guarantees an unbounded last step
        raise ConfigurationError("social insurance table is not total")

    def tax_bracket(self, gross_pay: Decimal) -> TaxBracket:
        selected = self.tax_brackets[0]
        for bracket in self.tax_brackets[1:]:
            if gross_pay > bracket.min_amount:
                selected = bracket
            else:
                break
        return selected


def _dec(value: Any) -> Decimal:
    try:
        result = as_decimal(value)
    except InvalidInputError as e:
        raise ConfigurationError(f"malformed statutory schedule: {e.message}") from None
    if not result.is_finite():
        raise ConfigurationError(f"malformed statutory schedule: non-finite value {value!r}")
    return result


DEFAULT_SCHEDULE_PAYLOAD: dict[str, Any] = {
    "name": "PH-2023",
    "social_insurance": {
        "steps": [
            {"max": 3250 + 1000 * i, "amount": str(Decimal("135.00") + Decimal("22.50") * i)}
            for i in range(22)
        ]
        + [{"max": None, "amount": "630.00"}],
    },
    "health_insurance": {"rate": "0.04"},
    "housing_fund": {
        "low_threshold": "1000",
        "high_threshold": "1500",
        "low_rate": "0.01",
        "high_rate": "0.02",
        "cap": "100.00",
    },
    "withholding_tax": {
        "brackets": [
            {"min": "0", "base": "0", "rate": "0"},
            {"min": "20833", "base": "0", "rate": "0.20"},
            {"min": "33333", "base": "2500", "rate": "0.25"},
            {"min": "66667", "base": "10833.33", "rate": "0.30"},
            {"min": "166667", "base": "40833.33", "rate": "0.32"},
            {"min": "666667", "base": "200833.33", "rate": "0.35"},
        ]
    },
}


def default_schedule() -> StatutorySchedule:
    """Return the built-in schedule."""
    return StatutorySchedule.from_payload(DEFAULT_SCHEDULE_PAYLOAD)


def load_schedule(path: str | Path) -> StatutorySchedule:
    """Load a schedule from a JSON file."""
    try:
        payload = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"cannot read statutory schedule {path}: {e}") from e
    if not isinstance(payload, dict):
        raise ConfigurationError(f"statutory schedule {path} must be a JSON object")
    return StatutorySchedule.from_payload(payload)


def _resolve(schedule: StatutorySchedule | None) -> StatutorySchedule:
    if schedule is not None:
        return schedule
    from attendance_payroll.config import get_statutory_schedule

    return get_statutory_schedule()


# === Contribution functions ===


def social_insurance_contribution(
    gross_pay: Number, schedule: StatutorySchedule | None = None
) -> Decimal:
    """Fixed contribution from the step table bracket containing gross pay."""
    gross = validate_gross_pay(gross_pay)
    return round_to_cents(_resolve(schedule).social_insurance_step(gross).amount)


def health_insurance_contribution(
    gross_pay: Number, schedule: StatutorySchedule | None = None
) -> Decimal:
    """Flat percentage of gross pay, no cap and no floor."""
    gross = validate_gross_pay(gross_pay)
    return round_to_cents(gross * _resolve(schedule).health_insurance_rate)


def housing_fund_contribution(
    gross_pay: Number, schedule: StatutorySchedule | None = None
) -> Decimal:
    """Band rate times gross pay, capped regardless of band."""
    gross = validate_gross_pay(gross_pay)
    policy = _resolve(schedule).housing_fund
    return round_to_cents(min(gross * policy.rate_for(gross), policy.cap))


def withholding_tax(gross_pay: Number, schedule: StatutorySchedule | None = None) -> Decimal:
    """Progressive tax: bracket base plus marginal rate on the excess."""
    gross = validate_gross_pay(gross_pay)
    bracket = _resolve(schedule).tax_bracket(gross)
    tax = bracket.base_amount + (gross - bracket.min_amount) * bracket.rate
    return round_to_cents(max(tax, ZERO))


CONTRIBUTIONS = {
    "social_insurance": social_insurance_contribution,
    "health_insurance": health_insurance_contribution,
    "housing_fund": housing_fund_contribution,
    "withholding_tax": withholding_tax,
}


def compute_deductions(
    gross_pay: Number, schedule: StatutorySchedule | None = None
) -> DeductionBreakdown:
    """Run the four contribution lookups independently on the same gross pay."""
    resolved = _resolve(schedule)
    return DeductionBreakdown(
        social_insurance=social_insurance_contribution(gross_pay, resolved),
        health_insurance=health_insurance_contribution(gross_pay, resolved),
        housing_fund=housing_fund_contribution(gross_pay, resolved),
        withholding_tax=withholding_tax(gross_pay, resolved),
    )
