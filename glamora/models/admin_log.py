"""Admin Log Model - Defines the audit log schema for admin and system actions."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ActorType(str, Enum):
    """Type of actor performing the action."""
    USER = "user"
    ADMIN = "admin"
    SYSTEM = "system"


class AdminLog(BaseModel):
    """
    Audit entry for moderation actions.

    Every admin change to a user, report, listing or setting is recorded,
    as are restrictions lifted by the expiry job.
    """
    log_id: str = Field(..., description="Unique log ID")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    actor_type: ActorType
    actor_id: str = Field(..., description="Actor's ID")
    actor_email: Optional[str] = Field(None, description="Actor's email")
    action: str = Field(..., description="Action name")
    target_type: Optional[str] = Field(None)
    target_id: Optional[str] = Field(None)
    before_state: Optional[dict] = Field(None)
    after_state: Optional[dict] = Field(None)
    metadata: Optional[dict] = Field(None)

    class Config:
        use_enum_values = True


class AdminLogResponse(BaseModel):
    """Response model for admin log."""
    log_id: str
    timestamp: datetime
    actor_type: str
    actor_email: Optional[str]
    action: str
    target_type: Optional[str]
    target_id: Optional[str]
    metadata: Optional[dict] = None
