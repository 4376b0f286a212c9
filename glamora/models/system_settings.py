"""System Settings Model - Community and moderation settings edited from the dashboard."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

SETTINGS_KEY = "global"


class SystemSettings(BaseModel):
    """Persisted settings document (single document keyed by SETTINGS_KEY)."""
    community_guidelines: str = "Welcome to Glamora! Please follow these guidelines..."
    max_file_size: str = "10MB"
    allowed_file_types: List[str] = Field(
        default_factory=lambda: ["jpg", "jpeg", "png", "gif"]
    )
    auto_moderation_enabled: bool = True
    report_threshold: int = Field(default=3, ge=1)
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class SystemSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""
    community_guidelines: Optional[str] = Field(None, max_length=10000)
    max_file_size: Optional[str] = Field(None, pattern=r"^\d+(KB|MB|GB)$")
    allowed_file_types: Optional[List[str]] = None
    auto_moderation_enabled: Optional[bool] = None
    report_threshold: Optional[int] = Field(None, ge=1, le=100)
