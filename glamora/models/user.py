"""User Model - Defines the user schema for MongoDB persistence."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """User roles for RBAC."""
    USER = "user"
    ADMIN = "admin"


class RestrictionDuration(str, Enum):
    """Fixed restriction lengths offered by the admin dashboard."""
    ONE_DAY = "1 day"
    TEN_DAYS = "10 days"
    TWENTY_DAYS = "20 days"
    ONE_MONTH = "1 month"


RESTRICTION_OFFSETS = {
    RestrictionDuration.ONE_DAY: timedelta(days=1),
    RestrictionDuration.TEN_DAYS: timedelta(days=10),
    RestrictionDuration.TWENTY_DAYS: timedelta(days=20),
    RestrictionDuration.ONE_MONTH: timedelta(days=30),
}


def restriction_offset(duration: str) -> timedelta:
    """
    Map a restriction duration literal to its offset.

    Raises ValueError for anything outside the four supported literals.
    """
    try:
        return RESTRICTION_OFFSETS[RestrictionDuration(duration)]
    except ValueError:
        raise ValueError(f"Invalid restriction duration: {duration!r}") from None


class AccountStatus(BaseModel):
    """
    Restriction state stored on the user document.

    A restriction is in force while is_restricted is set and
    restriction_end_date is in the future.
    """
    is_active: bool = True
    is_restricted: bool = False
    restriction_reason: Optional[str] = None
    restriction_start_date: Optional[datetime] = None
    restriction_end_date: Optional[datetime] = None
    restriction_duration: Optional[str] = None
    restricted_by: Optional[str] = None

    def is_in_force(self, now: datetime) -> bool:
        if not self.is_restricted or self.restriction_end_date is None:
            return False
        end = self.restriction_end_date
        if end.tzinfo is None:
            end = end.replace(tzinfo=timezone.utc)
        return end > now


class User(BaseModel):
    """
    User model for MongoDB.

    Fields:
    - user_id: Internal immutable UUID, never changes
    - name: Display name
    - email: Login email (unique)
    - password_hash: bcrypt hash, never returned by the API
    - role: RBAC role (user/admin)
    - is_active: False once an admin deactivates (soft deletes) the account
    - account_status: Timed restriction state
    - profile_picture_url: Avatar URL
    """
    user_id: str = Field(..., description="Internal UUID")
    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Login email")
    password_hash: Optional[str] = Field(None, exclude=True)
    role: UserRole = Field(default=UserRole.USER)
    is_active: bool = Field(default=True)
    account_status: AccountStatus = Field(default_factory=AccountStatus)
    profile_picture_url: Optional[str] = Field(None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        use_enum_values = True


class UserPublic(BaseModel):
    """User fields safe to return to clients."""
    user_id: str
    name: str
    email: str
    role: str
    is_active: bool
    account_status: AccountStatus
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(**user.model_dump(include=set(cls.model_fields)))


class UserUpdate(BaseModel):
    """Data that can be updated by the user."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    profile_picture_url: Optional[str] = None


class AdminUserUpdate(BaseModel):
    """Fields an admin may change on another account."""
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
