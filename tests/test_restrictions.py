"""
Tests for Account Restrictions

Unit tests for restriction durations, the restrict-from-report workflow
and restriction expiry.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime, timedelta, timezone

from glamora.models.user import (
    AccountStatus,
    RestrictionDuration,
    User,
    restriction_offset,
)
from glamora.services.report_service import ReportNotFoundError, ReportService
from glamora.services.user_service import UserService


REPORT_DOC = {
    "report_id": "report_1",
    "reporter_id": "user_a",
    "reported_user_id": "user_b",
    "reason": "Scam listing",
    "status": "pending",
    "created_at": datetime(2024, 3, 1, tzinfo=timezone.utc),
}

REPORTED_USER_DOC = {
    "user_id": "user_b",
    "name": "Bea",
    "email": "bea@example.com",
    "role": "user",
    "is_active": True,
}


class TestRestrictionDurations:
    """Duration literals and their offsets."""

    @pytest.mark.parametrize("duration,days", [
        ("1 day", 1),
        ("10 days", 10),
        ("20 days", 20),
        ("1 month", 30),
    ])
    def test_known_durations(self, duration, days):
        assert restriction_offset(duration) == timedelta(days=days)

    def test_one_day_is_86400000_ms(self):
        offset = restriction_offset(RestrictionDuration.ONE_DAY.value)
        assert offset.total_seconds() * 1000 == 86_400_000

    @pytest.mark.parametrize("duration", ["2 days", "1 week", "", "1 DAY", "30"])
    def test_unknown_durations_rejected(self, duration):
        with pytest.raises(ValueError):
            restriction_offset(duration)

    def test_unknown_duration_error_is_not_chained(self):
        with pytest.raises(ValueError) as exc_info:
            restriction_offset("2 weeks")

        assert "2 weeks" in str(exc_info.value)
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True


class TestAccountStatus:
    def test_in_force_until_end_date(self):
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)
        status = AccountStatus(
            is_restricted=True,
            restriction_end_date=now + timedelta(hours=1)
        )
        assert status.is_in_force(now) is True
        assert status.is_in_force(now + timedelta(hours=2)) is False

    def test_naive_end_date_treated_as_utc(self):
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)
        status = AccountStatus(
            is_restricted=True,
            restriction_end_date=datetime(2024, 3, 2)
        )
        assert status.is_in_force(now) is True

    def test_not_restricted_is_never_in_force(self):
        assert AccountStatus().is_in_force(datetime.now(timezone.utc)) is False


class TestRestrictUser:
    """Tests for UserService.restrict_user."""

    @pytest.fixture
    def service(self):
        return UserService()

    @pytest.mark.asyncio
    async def test_restrict_user_sets_account_status(self, service):
        now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

        with patch('glamora.services.user_service.get_db') as mock_db:
            mock_collection = AsyncMock()
            mock_db.return_value.users = mock_collection

            status = await service.restrict_user(
                "user_b", "10 days", "Spam", restricted_by="admin_1", now=now
            )

            mock_collection.update_one.assert_called_once()
            call_args = mock_collection.update_one.call_args
            assert call_args[0][0] == {"user_id": "user_b"}

            account_status = call_args[0][1]["$set"]["account_status"]
            assert account_status["is_active"] is True
            assert account_status["is_restricted"] is True
            assert account_status["restriction_reason"] == "Spam"
            assert account_status["restriction_start_date"] == now
            assert account_status["restriction_end_date"] == now + timedelta(days=10)
            assert account_status["restriction_duration"] == "10 days"
            assert account_status["restricted_by"] == "admin_1"

        assert status.restriction_end_date == now + timedelta(days=10)

    @pytest.mark.asyncio
    async def test_invalid_duration_writes_nothing(self, service):
        with patch('glamora.services.user_service.get_db') as mock_db:
            with pytest.raises(ValueError):
                await service.restrict_user("user_b", "3 days", "Spam", restricted_by="admin_1")

            mock_db.assert_not_called()


class TestRestrictReportedUser:
    """Tests for ReportService.restrict_reported_user."""

    @pytest.fixture
    def service(self):
        return ReportService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("duration,reason", [
        (None, "Spam"),
        ("1 day", None),
        ("", "Spam"),
        ("1 day", "   "),
    ])
    async def test_missing_fields(self, service, duration, reason):
        with patch('glamora.services.report_service.get_db') as mock_db:
            with pytest.raises(ValueError) as exc_info:
                await service.restrict_reported_user("report_1", duration, reason, "admin_1")

            assert str(exc_info.value) == (
                "restriction_duration and restriction_reason are required."
            )
            mock_db.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_duration(self, service):
        with patch('glamora.services.report_service.get_db') as mock_db:
            with pytest.raises(ValueError) as exc_info:
                await service.restrict_reported_user("report_1", "2 weeks", "Spam", "admin_1")

            assert str(exc_info.value) == "Invalid restriction duration."
            assert exc_info.value.__suppress_context__ is True
            mock_db.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_report(self, service):
        with patch('glamora.services.report_service.get_db') as mock_db:
            mock_db.return_value.reports.find_one = AsyncMock(return_value=None)

            with pytest.raises(ReportNotFoundError):
                await service.restrict_reported_user("missing", "1 day", "Spam", "admin_1")

    @pytest.mark.asyncio
    async def test_reported_user_missing(self, service):
        db = MagicMock()
        db.reports.find_one = AsyncMock(return_value=dict(REPORT_DOC))
        db.users.find_one = AsyncMock(return_value=None)

        with patch('glamora.services.report_service.get_db', return_value=db), \
                patch('glamora.services.user_service.get_db', return_value=db):
            with pytest.raises(ReportNotFoundError) as exc_info:
                await service.restrict_reported_user("report_1", "1 day", "Spam", "admin_1")

        assert "Reported user" in str(exc_info.value)
        db.users.update_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_restrict_and_resolve(self, service):
        resolved_doc = dict(REPORT_DOC, status="resolved", resolved_by="admin_1")

        db = MagicMock()
        db.reports.find_one = AsyncMock(side_effect=[dict(REPORT_DOC), resolved_doc])
        db.reports.update_one = AsyncMock()
        db.users.find_one = AsyncMock(return_value=dict(REPORTED_USER_DOC))
        db.users.update_one = AsyncMock()

        with patch('glamora.services.report_service.get_db', return_value=db), \
                patch('glamora.services.user_service.get_db', return_value=db):
            report, end_date = await service.restrict_reported_user(
                "report_1", "20 days", "  Harassment  ", "admin_1"
            )

        user_set = db.users.update_one.call_args[0][1]["$set"]
        account_status = user_set["account_status"]
        assert account_status["restriction_reason"] == "Harassment"
        assert account_status["restricted_by"] == "admin_1"
        assert end_date == account_status["restriction_end_date"]
        assert end_date - account_status["restriction_start_date"] == timedelta(days=20)

        report_filter, report_update = db.reports.update_one.call_args[0]
        assert report_filter == {"report_id": "report_1"}
        report_set = report_update["$set"]
        assert report_set["status"] == "resolved"
        assert report_set["resolved_by"] == "admin_1"
        assert report_set["resolved_at"] == account_status["restriction_start_date"]
        assert report_set["admin_notes"] == (
            "User restricted for 20 days. Reason: Harassment"
        )

        assert report.status == "resolved"


class TestRestrictionExpiry:
    """Tests for expired restriction handling."""

    @pytest.fixture
    def service(self):
        return UserService()

    def _restricted_user(self, end_date):
        return User(
            user_id="user_b",
            name="Bea",
            email="bea@example.com",
            account_status=AccountStatus(
                is_restricted=True,
                restriction_reason="Spam",
                restriction_end_date=end_date,
                restriction_duration="1 day",
            )
        )

    @pytest.mark.asyncio
    async def test_expired_restriction_is_lifted(self, service):
        user = self._restricted_user(datetime.now(timezone.utc) - timedelta(minutes=1))

        with patch('glamora.services.user_service.get_db') as mock_db:
            mock_collection = AsyncMock()
            mock_db.return_value.users = mock_collection

            is_clear = await service.check_restriction_expired(user)

            assert is_clear is True
            mock_collection.update_one.assert_called_once()
            cleared = mock_collection.update_one.call_args[0][1]["$set"]["account_status"]
            assert cleared["is_restricted"] is False
            assert cleared["restriction_end_date"] is None

    @pytest.mark.asyncio
    async def test_active_restriction_is_kept(self, service):
        user = self._restricted_user(datetime.now(timezone.utc) + timedelta(days=1))

        with patch('glamora.services.user_service.get_db') as mock_db:
            is_clear = await service.check_restriction_expired(user)

            assert is_clear is False
            mock_db.assert_not_called()

    @pytest.mark.asyncio
    async def test_sweep_lifts_all_expired(self, service, cursor_factory):
        with patch('glamora.services.user_service.get_db') as mock_db:
            users = MagicMock()
            users.find = MagicMock(return_value=cursor_factory([
                {"user_id": "user_b"},
                {"user_id": "user_c"},
            ]))
            users.update_many = AsyncMock()
            mock_db.return_value.users = users

            lifted = await service.lift_expired_restrictions()

        assert lifted == ["user_b", "user_c"]
        query = users.find.call_args[0][0]
        assert query["account_status.is_restricted"] is True
        assert "$lte" in query["account_status.restriction_end_date"]

        update_filter = users.update_many.call_args[0][0]
        assert update_filter["user_id"] == {"$in": ["user_b", "user_c"]}

    @pytest.mark.asyncio
    async def test_sweep_without_expired_users(self, service, cursor_factory):
        with patch('glamora.services.user_service.get_db') as mock_db:
            users = MagicMock()
            users.find = MagicMock(return_value=cursor_factory([]))
            users.update_many = AsyncMock()
            mock_db.return_value.users = users

            lifted = await service.lift_expired_restrictions()

        assert lifted == []
        users.update_many.assert_not_called()
