"""
Tests for Admin and Account Gate Endpoints

Route-level tests for authentication, authorization, restriction
enforcement and error rendering.
"""

import pytest
from unittest.mock import AsyncMock, patch
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from glamora import dependencies
from glamora.main import app
from glamora.models.report import Report
from glamora.models.system_settings import SystemSettings
from glamora.models.user import AccountStatus, User
from glamora.routers import admin as admin_router
from glamora.services.auth_service import AuthService
from glamora.services.report_service import ReportNotFoundError


auth_service = AuthService()

ADMIN = User(user_id="admin_1", name="Admin", email="admin@glamora.com", role="admin")
MEMBER = User(user_id="user_a", name="Ana", email="ana@example.com")


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {auth_service.create_access_token(user)}"}


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


def signed_in_as(user):
    """Make the auth dependencies resolve every token subject to ``user``."""
    return patch.object(
        dependencies.user_service, "get_user", AsyncMock(return_value=user)
    )


class TestAdminAuthorization:
    """Admin routes: 401 without a valid token, 403 without the admin role."""

    def test_missing_token(self, client):
        response = client.get("/api/admin/metrics")

        assert response.status_code == 401
        assert response.json() == {"message": "No token provided"}

    def test_wrong_scheme(self, client):
        response = client.get("/api/admin/metrics", headers={"Authorization": "Token abc"})

        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get(
            "/api/admin/metrics",
            headers={"Authorization": "Bearer not.a.token"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_non_admin_token(self, client):
        with signed_in_as(MEMBER):
            response = client.get("/api/admin/metrics", headers=bearer(MEMBER))

        assert response.status_code == 403
        assert response.json() == {"message": "Admin access required"}

    def test_token_for_deleted_user(self, client):
        with signed_in_as(None):
            response = client.get("/api/admin/metrics", headers=bearer(ADMIN))

        assert response.status_code == 403

    def test_admin_token(self, client):
        metrics = {"total_users": 4, "pending_reports": 1}
        with signed_in_as(ADMIN), \
                patch.object(admin_router.analytics_service, "get_metrics",
                             AsyncMock(return_value=metrics)):
            response = client.get("/api/admin/metrics", headers=bearer(ADMIN))

        assert response.status_code == 200
        assert response.json() == metrics


class TestAdminLogin:
    def test_invalid_credentials(self, client):
        with patch.object(admin_router.auth_service, "authenticate_admin",
                          AsyncMock(return_value=None)):
            response = client.post(
                "/api/admin/login",
                json={"username": "admin", "password": "wrong"}
            )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    def test_successful_login(self, client):
        with patch.object(admin_router.auth_service, "authenticate_admin",
                          AsyncMock(return_value=ADMIN)), \
                patch.object(admin_router.audit_service, "log_admin_action", AsyncMock()):
            response = client.post(
                "/api/admin/login",
                json={"username": "admin", "password": "admin-password"}
            )

        assert response.status_code == 200
        body = response.json()
        assert body["user"] == {
            "id": "admin_1",
            "name": "Admin",
            "email": "admin@glamora.com",
            "role": "admin",
        }
        claims = auth_service.decode_token(body["token"])
        assert claims["sub"] == "admin_1"
        assert claims["role"] == "admin"


class TestRestrictEndpoint:
    """PUT /api/admin/reports/{id}/restrict"""

    def test_invalid_duration(self, client):
        with signed_in_as(ADMIN):
            response = client.put(
                "/api/admin/reports/report_1/restrict",
                headers=bearer(ADMIN),
                json={"restriction_duration": "2 weeks", "restriction_reason": "Spam"}
            )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid restriction duration."}

    def test_missing_reason(self, client):
        with signed_in_as(ADMIN):
            response = client.put(
                "/api/admin/reports/report_1/restrict",
                headers=bearer(ADMIN),
                json={"restriction_duration": "1 day"}
            )

        assert response.status_code == 400
        assert response.json() == {
            "message": "restriction_duration and restriction_reason are required."
        }

    def test_unknown_report(self, client):
        with signed_in_as(ADMIN), \
                patch.object(admin_router.report_service, "restrict_reported_user",
                             AsyncMock(side_effect=ReportNotFoundError("Report not found."))):
            response = client.put(
                "/api/admin/reports/missing/restrict",
                headers=bearer(ADMIN),
                json={"restriction_duration": "1 day", "restriction_reason": "Spam"}
            )

        assert response.status_code == 404
        assert response.json() == {"message": "Report not found."}

    def test_success_is_audited(self, client):
        end_date = datetime(2024, 3, 11, 12, 0, tzinfo=timezone.utc)
        report = Report(
            report_id="report_1",
            reporter_id="user_a",
            reported_user_id="user_b",
            reason="Spam",
            status="resolved",
        )
        log_admin_action = AsyncMock()

        with signed_in_as(ADMIN), \
                patch.object(admin_router.report_service, "restrict_reported_user",
                             AsyncMock(return_value=(report, end_date))), \
                patch.object(admin_router.audit_service, "log_admin_action", log_admin_action):
            response = client.put(
                "/api/admin/reports/report_1/restrict",
                headers=bearer(ADMIN),
                json={"restriction_duration": "10 days", "restriction_reason": "Spam"}
            )

        assert response.status_code == 200
        body = response.json()
        assert body["restriction_duration"] == "10 days"
        assert body["restriction_end_date"].startswith("2024-03-11T12:00:00")
        assert "message" in body

        audit_kwargs = log_admin_action.call_args.kwargs
        assert audit_kwargs["action"] == "restrict_user"
        assert audit_kwargs["target_id"] == "user_b"
        assert audit_kwargs["admin_id"] == "admin_1"


class TestOtherAdminErrors:
    def test_unknown_analytics_period(self, client):
        with signed_in_as(ADMIN):
            response = client.get(
                "/api/admin/analytics?period=2weeks",
                headers=bearer(ADMIN)
            )

        assert response.status_code == 400

    def test_approve_unknown_item(self, client):
        with signed_in_as(ADMIN), \
                patch.object(admin_router.marketplace_service, "approve_item",
                             AsyncMock(return_value=None)):
            response = client.put(
                "/api/admin/marketplace/missing/approve",
                headers=bearer(ADMIN)
            )

        assert response.status_code == 404
        assert response.json() == {"message": "Item not found"}

    def test_unhandled_error_is_hidden(self, client):
        with signed_in_as(ADMIN), \
                patch.object(admin_router.analytics_service, "get_metrics",
                             AsyncMock(side_effect=RuntimeError("mongo exploded"))):
            response = client.get("/api/admin/metrics", headers=bearer(ADMIN))

        assert response.status_code == 500
        assert response.json() == {"message": "Server error"}


class TestSettingsEndpoint:
    """GET /api/admin/settings"""

    def test_settings_are_wrapped(self, client):
        stored = SystemSettings(report_threshold=5)
        with signed_in_as(ADMIN), \
                patch.object(admin_router.settings_service, "get_settings",
                             AsyncMock(return_value=stored)):
            response = client.get("/api/admin/settings", headers=bearer(ADMIN))

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"settings"}
        assert body["settings"]["max_file_size"] == "10MB"
        assert body["settings"]["report_threshold"] == 5


class TestAccountGate:
    """Mobile routes refuse deactivated and restricted accounts."""

    def test_active_user(self, client):
        with signed_in_as(MEMBER):
            response = client.get("/api/users/me", headers=bearer(MEMBER))

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == "user_a"
        assert "password_hash" not in body

    def test_deactivated_user(self, client):
        inactive = MEMBER.model_copy(update={"is_active": False})
        with signed_in_as(inactive):
            response = client.get("/api/users/me", headers=bearer(inactive))

        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "account_deactivated"

    def test_restricted_user(self, client):
        end = datetime.now(timezone.utc) + timedelta(days=3)
        restricted = MEMBER.model_copy(update={
            "account_status": AccountStatus(
                is_restricted=True,
                restriction_reason="Spam",
                restriction_end_date=end,
                restriction_duration="10 days",
            )
        })
        with signed_in_as(restricted):
            response = client.get("/api/users/me", headers=bearer(restricted))

        assert response.status_code == 403
        body = response.json()
        assert body["detail"]["error"] == "account_restricted"
        assert body["detail"]["reason"] == "Spam"
        assert body["detail"]["restriction_end_date"] == end.isoformat()

    def test_expired_restriction_lets_user_through(self, client):
        restricted = MEMBER.model_copy(update={
            "account_status": AccountStatus(
                is_restricted=True,
                restriction_end_date=datetime.now(timezone.utc) - timedelta(minutes=5),
            )
        })
        with signed_in_as(restricted), \
                patch.object(dependencies.user_service, "check_restriction_expired",
                             AsyncMock(return_value=True)) as check:
            response = client.get("/api/users/me", headers=bearer(restricted))

        assert response.status_code == 200
        check.assert_awaited_once()
