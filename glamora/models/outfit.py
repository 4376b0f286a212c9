"""Outfit Model - Saved outfit combinations and their wear history."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


class OutfitItem(BaseModel):
    """Snapshot of a wardrobe item inside an outfit."""
    wardrobe_item_id: str
    item_name: str
    item_description: Optional[str] = None
    item_image_url: Optional[str] = None
    item_category: Optional[str] = None


class Outfit(BaseModel):
    """
    Outfit model for MongoDB.

    Items are stored as snapshots so the history survives wardrobe edits.
    """
    outfit_id: str = Field(..., description="Unique outfit ID")
    user_id: str = Field(..., description="Owner")
    outfit_name: str
    outfit_items: List[OutfitItem] = Field(default_factory=list)
    occasion: Optional[str] = None
    weather: Optional[str] = None
    notes: Optional[str] = None
    is_favorite: bool = False
    worn_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class OutfitCreate(BaseModel):
    """Outfit submitted by the mobile client."""
    outfit_name: str = Field(..., min_length=1, max_length=100)
    outfit_items: List[OutfitItem] = Field(..., min_length=1)
    occasion: Optional[str] = Field(None, max_length=50)
    weather: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)
