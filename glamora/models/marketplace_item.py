"""Marketplace Item Model - Listings that pass through the moderation queue."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ItemStatus(str, Enum):
    """Moderation status of a listing."""
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class MarketplaceItem(BaseModel):
    """
    Marketplace listing stored in MongoDB.

    New listings start as pending and only become visible to other users
    once an admin approves them.
    """
    item_id: str = Field(..., description="Unique listing ID")
    user_id: str = Field(..., description="Owner")
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    status: ItemStatus = Field(default=ItemStatus.PENDING)
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        use_enum_values = True


class MarketplaceItemCreate(BaseModel):
    """Listing submitted by a user."""
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(None, max_length=2000)
    category: Optional[str] = Field(None, max_length=50)
    subcategory: Optional[str] = Field(None, max_length=50)
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None


class RejectItemRequest(BaseModel):
    """Admin rejection of a listing."""
    reason: Optional[str] = Field(None, max_length=500)
