"""Tests for statutory contribution tables."""

import json
from decimal import Decimal

import pytest

from attendance_payroll.calculators.statutory import (
    CONTRIBUTIONS,
    DEFAULT_SCHEDULE_PAYLOAD,
    StatutorySchedule,
    compute_deductions,
    health_insurance_contribution,
    housing_fund_contribution,
    load_schedule,
    round_to_cents,
    social_insurance_contribution,
    withholding_tax,
)
from attendance_payroll.exceptions import ConfigurationError, InvalidInputError


class TestRounding:
    def test_half_up(self):
        assert round_to_cents(Decimal("10.125")) == Decimal("10.13")
        assert round_to_cents(Decimal("10.124")) == Decimal("10.12")
        assert round_to_cents(Decimal("10.135")) == Decimal("10.14")


class TestSocialInsurance:
    """Test the step-table contribution."""

    @pytest.mark.parametrize(
        "gross,expected",
        [
            ("0", "135.00"),
            ("3250", "135.00"),
            ("3250.01", "157.50"),
            ("4250", "157.50"),
            ("4625", "180.00"),
            ("24250", "607.50"),
            ("24250.01", "630.00"),
            ("1000000", "630.00"),
        ],
    )
    def test_steps(self, schedule, gross, expected):
        """Upper bounds are inclusive; above the last bound the top amount applies."""
        assert social_insurance_contribution(Decimal(gross), schedule) == Decimal(expected)

    def test_negative_gross_rejected(self, schedule):
        with pytest.raises(InvalidInputError):
            social_insurance_contribution(Decimal("-1"), schedule)


class TestHealthInsurance:
    def test_flat_four_percent(self, schedule):
        assert health_insurance_contribution(Decimal("25000"), schedule) == Decimal("1000.00")

    def test_no_cap(self, schedule):
        assert health_insurance_contribution(Decimal("1000000"), schedule) == Decimal("40000.00")

    def test_zero(self, schedule):
        assert health_insurance_contribution(Decimal("0"), schedule) == Decimal("0.00")

    def test_rounds_half_up(self, schedule):
        """0.04 x 100.125 = 4.005 -> 4.01."""
        assert health_insurance_contribution(Decimal("100.125"), schedule) == Decimal("4.01")


class TestHousingFund:
    """Test the banded, capped contribution."""

    @pytest.mark.parametrize(
        "gross,expected",
        [
            ("0", "0.00"),
            ("999.99", "0.00"),
            ("1000", "10.00"),
            ("1500", "15.00"),
            ("1500.01", "30.00"),
            ("4625", "92.50"),
            ("5000", "100.00"),
            ("10000", "100.00"),
        ],
    )
    def test_bands_and_cap(self, schedule, gross, expected):
        assert housing_fund_contribution(Decimal(gross), schedule) == Decimal(expected)


class TestWithholdingTax:
    """Test the progressive tax brackets."""

    @pytest.mark.parametrize(
        "gross,expected",
        [
            ("0", "0.00"),
            ("20833", "0.00"),
            ("20834", "0.20"),
            ("25000", "833.40"),
            ("33333", "2500.00"),
            ("33334", "2500.25"),
            ("100000", "20833.23"),
            ("166667", "40833.33"),
            ("666667", "200833.33"),
            ("666668", "200833.68"),
        ],
    )
    def test_brackets(self, schedule, gross, expected):
        """A gross exactly on a bracket boundary stays in the lower bracket."""
        assert withholding_tax(Decimal(gross), schedule) == Decimal(expected)

    def test_non_finite_rejected(self, schedule):
        with pytest.raises(InvalidInputError):
            withholding_tax(Decimal("NaN"), schedule)


class TestComputeDeductions:
    def test_all_four(self, schedule):
        breakdown = compute_deductions(Decimal("25000"), schedule)

        assert breakdown.social_insurance == Decimal("630.00")
        assert breakdown.health_insurance == Decimal("1000.00")
        assert breakdown.housing_fund == Decimal("100.00")
        assert breakdown.withholding_tax == Decimal("833.40")
        assert breakdown.total == Decimal("2563.40")

    def test_accepts_plain_numbers(self, schedule):
        assert compute_deductions(4625, schedule) == compute_deductions(Decimal("4625"), schedule)

    def test_boolean_rejected(self, schedule):
        with pytest.raises(InvalidInputError):
            compute_deductions(True, schedule)

    def test_uses_configured_schedule_by_default(self):
        assert compute_deductions(Decimal("25000")).total == Decimal("2563.40")

    def test_contribution_registry(self):
        assert set(CONTRIBUTIONS) == {
            "social_insurance",
            "health_insurance",
            "housing_fund",
            "withholding_tax",
        }


class TestScheduleValidation:
    """Test that malformed tables fail at load time."""

    def _payload(self, **overrides):
        payload = json.loads(json.dumps(DEFAULT_SCHEDULE_PAYLOAD))
        payload.update(overrides)
        return payload

    def test_default_schedule_is_valid(self, schedule):
        assert schedule.name == "PH-2023"
        assert len(schedule.social_insurance_steps) == 23
        assert schedule.social_insurance_steps[-1].max_amount is None

    def test_bounded_last_step_rejected(self):
        payload = self._payload(
            social_insurance={"steps": [{"max": 1000, "amount": 10}]},
        )
        with pytest.raises(ConfigurationError):
            StatutorySchedule.from_payload(payload)

    def test_unsorted_steps_rejected(self):
        payload = self._payload(
            social_insurance={
                "steps": [
                    {"max": 2000, "amount": 10},
                    {"max": 1000, "amount": 20},
                    {"max": None, "amount": 30},
                ]
            },
        )
        with pytest.raises(ConfigurationError):
            StatutorySchedule.from_payload(payload)

    def test_first_bracket_must_start_at_zero(self):
        payload = self._payload(
            withholding_tax={"brackets": [{"min": 100, "base": 0, "rate": 0}]},
        )
        with pytest.raises(ConfigurationError):
            StatutorySchedule.from_payload(payload)

    def test_decreasing_rates_rejected(self):
        payload = self._payload(
            withholding_tax={
                "brackets": [
                    {"min": 0, "base": 0, "rate": 0.2},
                    {"min": 1000, "base": 200, "rate": 0.1},
                ]
            },
        )
        with pytest.raises(ConfigurationError):
            StatutorySchedule.from_payload(payload)

    def test_missing_section_rejected(self):
        payload = self._payload()
        del payload["housing_fund"]
        with pytest.raises(ConfigurationError):
            StatutorySchedule.from_payload(payload)

    def test_non_numeric_value_rejected(self):
        payload = self._payload(health_insurance={"rate": "four percent"})
        with pytest.raises(ConfigurationError):
            StatutorySchedule.from_payload(payload)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"social_insurance": {"steps": [["3250", "135"]]}},
            {"social_insurance": {"steps": ["3250"]}},
            {"withholding_tax": {"brackets": [[0, 0, 0]]}},
            {"housing_fund": ["1000", "1500"]},
        ],
    )
    def test_entries_must_be_objects(self, overrides):
        with pytest.raises(ConfigurationError, match="malformed"):
            StatutorySchedule.from_payload(self._payload(**overrides))


class TestScheduleLoading:
    def test_payload_reload_keeps_fingerprint(self, schedule):
        reloaded = StatutorySchedule.from_payload(schedule.to_payload())

        assert reloaded == schedule
        assert reloaded.fingerprint() == schedule.fingerprint()

    def test_fingerprint_changes_with_rates(self, schedule):
        payload = schedule.to_payload()
        payload["health_insurance"]["rate"] = "0.05"

        assert StatutorySchedule.from_payload(payload).fingerprint() != schedule.fingerprint()

    def test_load_from_file(self, tmp_path, schedule):
        path = tmp_path / "schedule.json"
        path.write_text(json.dumps(schedule.to_payload()))

        assert load_schedule(path) == schedule

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_schedule(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_schedule(path)

    def test_json_array_rejected(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text("[]")
        with pytest.raises(ConfigurationError):
            load_schedule(path)
