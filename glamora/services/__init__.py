"""Glamora Services Package"""

from glamora.services.auth_service import AuthService
from glamora.services.user_service import UserService
from glamora.services.report_service import ReportService
from glamora.services.marketplace_service import MarketplaceService
from glamora.services.analytics_service import AnalyticsService
from glamora.services.settings_service import SettingsService
from glamora.services.outfit_service import OutfitService
from glamora.services.usage_service import UsageService
from glamora.services.audit_service import AuditService

__all__ = [
    "AuthService",
    "UserService",
    "ReportService",
    "MarketplaceService",
    "AnalyticsService",
    "SettingsService",
    "OutfitService",
    "UsageService",
    "AuditService",
]
