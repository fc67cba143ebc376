"""Integration tests for API endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

PAYROLL_URL = "/api/v1/employees/{}/payroll"
PERIOD = {"period_start": "2024-01-08", "period_end": "2024-01-14"}


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["schedule"] == "PH-2023"

    async def test_ready_and_live(self, client: AsyncClient):
        assert (await client.get("/ready")).json() == {"status": "ready"}
        assert (await client.get("/live")).json() == {"status": "alive"}


class TestContributionEndpoints:
    """Test statutory contribution lookups."""

    async def test_all_contributions(self, client: AsyncClient):
        response = await client.get("/api/v1/contributions", params={"gross_pay": "25000"})

        assert response.status_code == 200
        data = response.json()
        assert data["schedule"] == "PH-2023"
        deductions = {k: float(v) for k, v in data["deductions"].items()}
        assert deductions == {
            "social_insurance": 630.0,
            "health_insurance": 1000.0,
            "housing_fund": 100.0,
            "withholding_tax": 833.4,
            "total": 2563.4,
        }

    async def test_single_contribution(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/contributions/housing_fund", params={"gross_pay": "1000"}
        )

        assert response.status_code == 200
        assert float(response.json()["amount"]) == 10.0

    async def test_unknown_contribution_kind(self, client: AsyncClient):
        response = await client.get("/api/v1/contributions/bonus", params={"gross_pay": "1000"})

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Unknown contribution: bonus",
            "code": "UNKNOWN_CONTRIBUTION",
        }

    async def test_negative_gross_pay(self, client: AsyncClient):
        response = await client.get("/api/v1/contributions", params={"gross_pay": "-5"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"


class TestPreviewEndpoint:
    """Test stateless payroll preview."""

    def _payload(self, **overrides):
        payload = {
            "employee_id": "E001",
            "period_start": "2024-01-08",
            "period_end": "2024-01-14",
            "regular_hours": "40",
            "overtime_hours": "5",
            "profile": {"hourly_rate": "100"},
        }
        payload.update(overrides)
        return payload

    async def test_preview(self, client: AsyncClient):
        response = await client.post("/api/v1/payroll/preview", json=self._payload())

        assert response.status_code == 200
        data = response.json()
        assert float(data["gross_pay"]) == 4625.0
        assert float(data["net_pay"]) == 4167.5
        assert [line["code"] for line in data["lines"]] == [
            "REGULAR",
            "OVERTIME",
            "SSS",
            "PHILHEALTH",
            "PAGIBIG",
            "WTAX",
        ]

    async def test_preview_is_deterministic(self, client: AsyncClient):
        first = await client.post("/api/v1/payroll/preview", json=self._payload())
        second = await client.post("/api/v1/payroll/preview", json=self._payload())

        assert first.json()["calculation_id"] == second.json()["calculation_id"]

    async def test_zero_rate_is_unprocessable(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/preview", json=self._payload(profile={"hourly_rate": "0"})
        )

        assert response.status_code == 422
        assert response.json()["code"] == "CONFIGURATION_ERROR"

    async def test_negative_hours_is_bad_request(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/preview", json=self._payload(regular_hours="-1")
        )

        assert response.status_code == 400

    async def test_inverted_period_is_bad_request(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/preview",
            json=self._payload(period_start="2024-01-14", period_end="2024-01-08"),
        )

        assert response.status_code == 400


class TestEmployeePayrollEndpoint:
    """Test payroll for stored employees."""

    async def test_attendance_based(self, client: AsyncClient, seeded_db):
        response = await client.get(PAYROLL_URL.format("E001"), params=PERIOD)

        assert response.status_code == 200
        data = response.json()
        assert data["hours_source"] == "attendance"
        assert float(data["regular_hours"]) == 40.0
        assert float(data["overtime_hours"]) == 5.0
        assert float(data["net_pay"]) == 4167.5

    async def test_estimate_flag(self, client: AsyncClient, seeded_db):
        response = await client.get(
            PAYROLL_URL.format("E002"), params={**PERIOD, "estimate": "true"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["hours_source"] == "estimated_schedule"
        assert float(data["gross_pay"]) == 6000.0

    async def test_no_attendance_without_estimate(self, client: AsyncClient, seeded_db):
        response = await client.get(PAYROLL_URL.format("E002"), params=PERIOD)

        assert response.status_code == 200
        assert float(response.json()["gross_pay"]) == 0.0

    async def test_unknown_employee(self, client: AsyncClient, seeded_db):
        response = await client.get(PAYROLL_URL.format("NOPE"), params=PERIOD)

        assert response.status_code == 404
        assert response.json()["code"] == "EMPLOYEE_NOT_FOUND"


class TestAttendanceEndpoints:
    """Test login/logout recording feeding payroll."""

    async def test_record_day_then_compute(self, client: AsyncClient, seeded_db):
        base = "/api/v1/employees/E002/attendance"
        login = await client.post(f"{base}/login", json={"work_date": "2024-01-08", "at": "08:00"})
        logout = await client.post(
            f"{base}/logout", json={"work_date": "2024-01-08", "at": "17:00"}
        )

        assert login.status_code == 201
        assert logout.status_code == 201
        assert float(logout.json()["hours"]) == 9.0

        response = await client.get(PAYROLL_URL.format("E002"), params=PERIOD)
        data = response.json()
        assert float(data["regular_hours"]) == 8.0
        assert float(data["overtime_hours"]) == 1.0

    async def test_login_only_has_zero_hours(self, client: AsyncClient, seeded_db):
        response = await client.post(
            "/api/v1/employees/E002/attendance/login",
            json={"work_date": "2024-01-09", "at": "08:00"},
        )

        assert response.status_code == 201
        assert response.json()["logout_time"] is None
        assert float(response.json()["hours"]) == 0.0

    async def test_unknown_employee(self, client: AsyncClient, seeded_db):
        response = await client.post(
            "/api/v1/employees/NOPE/attendance/login",
            json={"work_date": "2024-01-09", "at": "08:00"},
        )

        assert response.status_code == 404

    async def test_time_with_offset_is_rejected(self, client: AsyncClient, seeded_db):
        base = "/api/v1/employees/E002/attendance"
        await client.post(f"{base}/login", json={"work_date": "2024-01-08", "at": "08:00"})

        response = await client.post(
            f"{base}/logout", json={"work_date": "2024-01-08", "at": "17:00+08:00"}
        )

        assert response.status_code == 422
        payroll = await client.get(PAYROLL_URL.format("E002"), params=PERIOD)
        assert payroll.status_code == 200
        assert float(payroll.json()["regular_hours"]) == 0.0

    async def test_list_attendance(self, client: AsyncClient, seeded_db):
        response = await client.get(
            "/api/v1/employees/E001/attendance",
            params={"period_start": "2024-01-09", "period_end": "2024-01-10"},
        )

        assert response.status_code == 200
        data = response.json()
        assert [r["work_date"] for r in data["records"]] == ["2024-01-09", "2024-01-10"]
        assert data["records"][0]["login_time"] == "08:00:00"
        assert float(data["total_hours"]) == 18.0

    async def test_list_attendance_empty(self, client: AsyncClient, seeded_db):
        response = await client.get("/api/v1/employees/E002/attendance", params=PERIOD)

        assert response.status_code == 200
        assert response.json()["records"] == []
        assert float(response.json()["total_hours"]) == 0.0

    async def test_list_attendance_inverted_range(self, client: AsyncClient, seeded_db):
        response = await client.get(
            "/api/v1/employees/E001/attendance",
            params={"period_start": "2024-01-14", "period_end": "2024-01-08"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_list_attendance_unknown_employee(self, client: AsyncClient, seeded_db):
        response = await client.get("/api/v1/employees/NOPE/attendance", params=PERIOD)

        assert response.status_code == 404


class TestEmployeeEndpoints:
    """Test employee registration and lookup."""

    def _payload(self, **overrides):
        payload = {
            "employee_id": "E100",
            "first_name": "Cora",
            "last_name": "Lim",
            "position": "Clerk",
            "department": "Accounting",
            "birthday": "1995-02-28",
            "philhealth_number": "12-345678901-2",
            "pagibig_number": "1234-5678-9012",
            "compensation": {"hourly_rate": "120.50", "rice_subsidy": "1500"},
        }
        payload.update(overrides)
        return payload

    async def test_create_then_get(self, client: AsyncClient, seeded_db):
        created = await client.post("/api/v1/employees", json=self._payload())

        assert created.status_code == 201
        assert created.json()["full_name"] == "Cora Lim"

        response = await client.get("/api/v1/employees/E100")
        data = response.json()
        assert response.status_code == 200
        assert data["department"] == "Accounting"
        assert data["birthday"] == "1995-02-28"
        assert data["pagibig_number"] == "1234-5678-9012"
        assert data["sss_number"] is None
        assert float(data["compensation"]["hourly_rate"]) == 120.5
        assert float(data["compensation"]["rice_subsidy"]) == 1500.0

    async def test_duplicate_is_conflict(self, client: AsyncClient, seeded_db):
        response = await client.post("/api/v1/employees", json=self._payload(employee_id="E001"))

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_EMPLOYEE"

    async def test_excess_precision_is_bad_request(self, client: AsyncClient, seeded_db):
        response = await client.post(
            "/api/v1/employees",
            json=self._payload(compensation={"hourly_rate": "100", "phone_allowance": "0.001"}),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_list(self, client: AsyncClient, seeded_db):
        response = await client.get("/api/v1/employees")

        assert response.status_code == 200
        assert [e["employee_id"] for e in response.json()] == ["E001", "E002"]
        assert response.json()[0]["sss_number"] == "34-1234567-8"

    async def test_get_unknown(self, client: AsyncClient, seeded_db):
        response = await client.get("/api/v1/employees/NOPE")

        assert response.status_code == 404
        assert response.json()["code"] == "EMPLOYEE_NOT_FOUND"
