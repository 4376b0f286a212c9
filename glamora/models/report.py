"""Report Model - Defines the report schema for safety and moderation."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ReportStatus(str, Enum):
    """Status of a report."""
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


# Statuses that close a report and stamp resolved_by/resolved_at
CLOSED_STATUSES = {ReportStatus.RESOLVED.value, ReportStatus.DISMISSED.value}


class Report(BaseModel):
    """
    Report model for MongoDB.

    Created when a user reports another user (optionally about one of their
    marketplace listings). Only admins change it afterwards.

    Fields:
    - report_id: Unique UUID for the report
    - reporter_id: User who filed the report
    - reported_user_id: User being reported
    - marketplace_item_id: Listing the report is about (if any)
    - reason: Short reason picked by the reporter
    - description: Free-text details
    - evidence_photos: Photo URLs attached by the reporter
    - status: Current status
    - admin_notes: Notes written by the reviewing admin
    - resolved_by: Admin who closed the report
    - resolved_at: When the report was closed
    """
    report_id: str = Field(..., description="Unique report ID")
    reporter_id: str = Field(..., description="User filing the report")
    reported_user_id: str = Field(..., description="User being reported")
    marketplace_item_id: Optional[str] = Field(None)
    reason: str = Field(..., description="Report reason")
    description: Optional[str] = Field(None)
    evidence_photos: List[str] = Field(default_factory=list)
    status: ReportStatus = Field(default=ReportStatus.PENDING)
    admin_notes: Optional[str] = Field(None)
    resolved_by: Optional[str] = Field(None, description="Admin user ID")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    resolved_at: Optional[datetime] = Field(None)

    class Config:
        use_enum_values = True


class ReportCreate(BaseModel):
    """Data required to create a report."""
    reported_user_id: str = Field(..., description="User being reported")
    marketplace_item_id: Optional[str] = Field(None)
    reason: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    evidence_photos: List[str] = Field(default_factory=list, max_length=10)


class ReportUpdate(BaseModel):
    """Admin review of a report."""
    status: ReportStatus
    admin_notes: Optional[str] = Field(None, max_length=2000)


class RestrictionRequest(BaseModel):
    """
    Restrict the reported user of a report.

    Both fields are checked by the service so that a missing value is a 400,
    matching the dashboard contract, rather than a schema error.
    """
    restriction_duration: Optional[str] = None
    restriction_reason: Optional[str] = None
