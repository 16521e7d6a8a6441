"""
Unit tests for API v1 routes.

Tests endpoint responses with mocked dependencies.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import get_registration_service
from src.api.errors import GENERIC_FAILURE, register_exception_handlers
from src.api.v1.routes import router
from src.domain.exceptions import (
    DuplicateEmail,
    InvalidStatus,
    MissingField,
    NoDaySelected,
    RegistrationNotFound,
    StoreFailure,
)
from src.domain.models import (
    AffiliationCount,
    AttendanceDay,
    NotificationKind,
    NotificationLogEntry,
    NotificationOutcome,
    NotificationStatus,
    RegistrationResult,
    RegistrationStats,
)
from src.domain.registration import RegistrationService

VALID_PAYLOAD = {
    "full_name": "Ada Lovelace",
    "email": "ada@example.com",
    "affiliation": "Analytical Society",
    "selected_days": ["day1", "day3"],
}


@pytest.fixture
def mock_service() -> MagicMock:
    return MagicMock(spec=RegistrationService)


@pytest.fixture
def app(mock_service: MagicMock) -> FastAPI:
    """Create test FastAPI application with the service overridden."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router, prefix="/v1")
    test_app.dependency_overrides[get_registration_service] = lambda: mock_service
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)


def _stats() -> RegistrationStats:
    return RegistrationStats(
        total=1,
        today=1,
        emails_sent=1,
        by_affiliation=[AffiliationCount("Analytical Society", 1)],
        by_day={day: int(day in (AttendanceDay.DAY1, AttendanceDay.DAY3)) for day in AttendanceDay},
    )


class TestRegisterEndpoint:
    """Tests for POST /v1/register endpoint."""

    def test_register_success_returns_201(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.register.return_value = RegistrationResult(registration_id=12, email_sent=True)

        response = client.post("/v1/register", json=VALID_PAYLOAD)

        assert response.status_code == 201
        assert response.json() == {
            "success": True,
            "message": "Registration successful! Please check your email for confirmation.",
            "registration_id": 12,
            "email_sent": True,
        }
        raw = mock_service.register.call_args.args[0]
        assert raw.email == "ada@example.com"
        assert raw.selected_days == ["day1", "day3"]

    def test_register_with_failed_email_still_201(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.register.return_value = RegistrationResult(registration_id=1, email_sent=False)

        response = client.post("/v1/register", json=VALID_PAYLOAD)

        assert response.status_code == 201
        assert response.json()["email_sent"] is False

    def test_register_validation_error_returns_400(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.register.side_effect = NoDaySelected()

        response = client.post("/v1/register", json={**VALID_PAYLOAD, "selected_days": []})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "detail": "Please select at least one day to attend",
        }

    def test_register_missing_field_returns_400(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.register.side_effect = MissingField("full_name")

        response = client.post("/v1/register", json={"email": "ada@example.com"})

        assert response.status_code == 400
        assert "required" in response.json()["detail"]

    def test_register_duplicate_returns_409(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.register.side_effect = DuplicateEmail("ada@example.com")

        response = client.post("/v1/register", json=VALID_PAYLOAD)

        assert response.status_code == 409
        assert response.json()["detail"] == "This email is already registered"

    def test_store_failure_returns_generic_500(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        """Internal error details are not leaked."""
        mock_service.register.side_effect = StoreFailure("connection reset by peer")

        response = client.post("/v1/register", json=VALID_PAYLOAD)

        assert response.status_code == 500
        assert response.json() == {"success": False, "detail": GENERIC_FAILURE}
        assert "connection reset" not in response.text

    def test_malformed_types_return_422(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.post("/v1/register", json={**VALID_PAYLOAD, "selected_days": "day1"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["detail"][0]["loc"][-1] == "selected_days"
        mock_service.register.assert_not_called()

    def test_non_object_body_returns_422_with_flag(self, client: TestClient) -> None:
        response = client.post("/v1/register", content="not json")

        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_unexpected_error_returns_generic_500(
        self, app: FastAPI, mock_service: MagicMock
    ) -> None:
        """Errors outside the domain hierarchy still get the uniform body."""
        mock_service.register.side_effect = KeyError("boom")
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/v1/register", json=VALID_PAYLOAD)

        assert response.status_code == 500
        assert response.json() == {"success": False, "detail": GENERIC_FAILURE}
        assert "boom" not in response.text


class TestLookupEndpoint:
    """Tests for GET /v1/registrations/{email}."""

    def test_found(self, client: TestClient, mock_service: MagicMock, make_registration) -> None:
        mock_service.get_registration_by_email.return_value = make_registration(id=5)

        response = client.get("/v1/registrations/ada@example.com")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["registration"]["id"] == 5
        assert body["registration"]["selected_days"] == ["Day 1 - Nov 10", "Day 3 - Nov 12"]

    def test_not_found(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.get_registration_by_email.side_effect = RegistrationNotFound("x")

        response = client.get("/v1/registrations/nobody@example.com")

        assert response.status_code == 404
        assert response.json() == {"success": False, "detail": "Registration not found"}


class TestStatusEndpoints:
    """Tests for the status and payment update endpoints."""

    def test_update_status(self, client: TestClient, mock_service: MagicMock, make_registration):
        mock_service.set_registration_status.return_value = make_registration()

        response = client.put("/v1/registrations/3/status", json={"status": "cancelled", "notes": "n"})

        assert response.status_code == 200
        assert response.json()["message"] == "Status updated successfully"
        mock_service.set_registration_status.assert_called_once_with(3, "cancelled", "n")

    def test_update_status_invalid(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.set_registration_status.side_effect = InvalidStatus("bogus", ["active"])

        response = client.put("/v1/registrations/3/status", json={"status": "bogus"})

        assert response.status_code == 400
        assert "bogus" in response.json()["detail"]

    def test_update_status_unknown_id(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.set_registration_status.side_effect = RegistrationNotFound(3)

        response = client.put("/v1/registrations/3/status", json={"status": "active"})

        assert response.status_code == 404

    def test_update_payment(self, client: TestClient, mock_service: MagicMock, make_registration):
        mock_service.set_payment_status.return_value = make_registration()

        response = client.put("/v1/registrations/3/payment", json={"status": "paid"})

        assert response.status_code == 200
        assert response.json()["message"] == "Payment status updated successfully"
        mock_service.set_payment_status.assert_called_once_with(3, "paid")

    def test_update_payment_invalid(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.set_payment_status.side_effect = InvalidStatus("free", ["paid"])

        response = client.put("/v1/registrations/3/payment", json={"status": "free"})

        assert response.status_code == 400

    def test_list_by_status(self, client: TestClient, mock_service: MagicMock, make_registration):
        mock_service.list_by_registration_status.return_value = [make_registration()]

        response = client.get("/v1/registrations/status/active")

        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert response.json()["registrations"][0]["selected_days"] == ["day1", "day3"]

    def test_list_by_status_invalid(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.list_by_registration_status.side_effect = InvalidStatus("bogus", ["active"])

        response = client.get("/v1/registrations/status/bogus")

        assert response.status_code == 400


class TestNotificationEndpoints:
    def test_history(self, client: TestClient, mock_service: MagicMock, make_registration) -> None:
        created = make_registration().created_at
        mock_service.notification_history.return_value = [
            NotificationLogEntry(
                id=1,
                registration_id=3,
                kind=NotificationKind.CONFIRMATION,
                recipient="ada@example.com",
                outcome=NotificationStatus.FAILED,
                error="not configured",
                created_at=created,
            )
        ]

        response = client.get("/v1/registrations/3/notifications")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["notifications"][0]["outcome"] == "failed"

    def test_resend_success(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.resend_confirmation.return_value = NotificationOutcome(success=True)

        response = client.post("/v1/registrations/3/resend-confirmation")

        assert response.status_code == 200
        assert response.json()["email_sent"] is True

    def test_resend_failure_reports_error(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.resend_confirmation.return_value = NotificationOutcome(False, "not configured")

        response = client.post("/v1/registrations/3/resend-confirmation")

        assert response.status_code == 200
        assert response.json()["message"] == "Confirmation email not sent: not configured"

    def test_resend_unknown(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.resend_confirmation.side_effect = RegistrationNotFound(3)

        response = client.post("/v1/registrations/3/resend-confirmation")

        assert response.status_code == 404


class TestAdminEndpoints:
    def test_admin_registrations(self, client: TestClient, mock_service: MagicMock, make_registration):
        mock_service.list_registrations.return_value = [make_registration()]
        mock_service.get_statistics.return_value = _stats()

        response = client.get("/v1/admin/registrations")

        assert response.status_code == 200
        body = response.json()
        assert len(body["registrations"]) == 1
        assert body["stats"]["total"] == 1

    def test_stats(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.get_statistics.return_value = _stats()

        response = client.get("/v1/stats")

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["by_day"] == {"day1": 1, "day2": 0, "day3": 1, "day4": 0, "day5": 0}
        assert stats["by_affiliation"] == [{"affiliation": "Analytical Society", "count": 1}]

    def test_day_roster(self, client: TestClient, mock_service: MagicMock, make_registration):
        mock_service.list_day_registrations.return_value = [make_registration()]

        response = client.get("/v1/days/3")

        assert response.status_code == 200
        assert response.json()["day"] == 3
        mock_service.list_day_registrations.assert_called_once_with(AttendanceDay.DAY3)

    @pytest.mark.parametrize("day_number", [0, 6])
    def test_day_out_of_range(self, client: TestClient, mock_service: MagicMock, day_number: int):
        response = client.get(f"/v1/days/{day_number}")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid day number. Must be between 1 and 5."
        mock_service.list_day_registrations.assert_not_called()
