"""Clothing Usage Model - One record per wardrobe item each time an outfit is worn."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class UsagePeriod(str, Enum):
    """Windows offered by the analytics screen."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class ClothingUsage(BaseModel):
    usage_id: str
    user_id: str
    outfit_id: str
    wardrobe_item_id: str
    item_name: Optional[str] = None
    item_category: Optional[str] = None
    worn_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TrackUsageRequest(BaseModel):
    outfit_id: str


class UsageItem(BaseModel):
    id: str
    name: str
    category: str
    usage_count: int
    max_usage: int


class UsageCategory(BaseModel):
    category: str
    items: List[UsageItem]


class FrequentUsageResponse(BaseModel):
    period: UsagePeriod
    categories: List[UsageCategory]
