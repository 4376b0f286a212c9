"""Glamora Models Package"""

from glamora.models.user import (
    User, UserPublic, UserUpdate, AdminUserUpdate, UserRole, AccountStatus,
    RestrictionDuration, restriction_offset,
)
from glamora.models.report import Report, ReportCreate, ReportUpdate, ReportStatus, RestrictionRequest
from glamora.models.marketplace_item import MarketplaceItem, MarketplaceItemCreate, ItemStatus
from glamora.models.outfit import Outfit, OutfitCreate, OutfitItem
from glamora.models.clothing_usage import ClothingUsage, UsagePeriod
from glamora.models.system_settings import SystemSettings, SystemSettingsUpdate
from glamora.models.admin_log import AdminLog, ActorType

__all__ = [
    "User", "UserPublic", "UserUpdate", "AdminUserUpdate", "UserRole", "AccountStatus",
    "RestrictionDuration", "restriction_offset",
    "Report", "ReportCreate", "ReportUpdate", "ReportStatus", "RestrictionRequest",
    "MarketplaceItem", "MarketplaceItemCreate", "ItemStatus",
    "Outfit", "OutfitCreate", "OutfitItem",
    "ClothingUsage", "UsagePeriod",
    "SystemSettings", "SystemSettingsUpdate",
    "AdminLog", "ActorType",
]
