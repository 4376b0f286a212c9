"""Clothing Usage Service - Wear tracking and most-worn items per category."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from glamora.database import get_db
from glamora.models.clothing_usage import (
    ClothingUsage,
    UsageCategory,
    UsageItem,
    UsagePeriod,
)
from glamora.services.outfit_service import OutfitService
from glamora.utils.timezone_utils import utc_now, window_start

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Other"


def group_usage_by_category(rows: List[Dict[str, Any]]) -> List[UsageCategory]:
    """
    Turn per-item counts into per-category lists.

    rows carry ``wardrobe_item_id``, ``item_name``, ``item_category`` and
    ``usage_count``. Categories are ordered by their busiest item; items by
    count (ties by name). max_usage is the top count within the category so
    the client can scale bars.
    """
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for row in rows:
        category = row.get("item_category") or UNCATEGORIZED
        grouped.setdefault(category, []).append(row)

    categories = []
    for category, items in grouped.items():
        items.sort(key=lambda r: (-r["usage_count"], r.get("item_name") or ""))
        max_usage = items[0]["usage_count"]
        categories.append(UsageCategory(
            category=category,
            items=[
                UsageItem(
                    id=r["wardrobe_item_id"],
                    name=r.get("item_name") or "",
                    category=category,
                    usage_count=r["usage_count"],
                    max_usage=max_usage,
                )
                for r in items
            ],
        ))

    categories.sort(key=lambda c: (-c.items[0].max_usage, c.category))
    return categories


class UsageService:
    def __init__(self):
        self.outfit_service = OutfitService()

    async def track_outfit(self, user_id: str, outfit_id: str) -> Optional[int]:
        """
        Record one wear of every item in an outfit.

        Returns the number of usage records written, or None when the outfit
        does not belong to the user.
        """
        outfit = await self.outfit_service.get_outfit(user_id, outfit_id)
        if not outfit:
            return None

        now = utc_now()
        records = [
            ClothingUsage(
                usage_id=str(uuid.uuid4()),
                user_id=user_id,
                outfit_id=outfit_id,
                wardrobe_item_id=item.wardrobe_item_id,
                item_name=item.item_name,
                item_category=item.item_category,
                worn_at=now,
            ).model_dump()
            for item in outfit.outfit_items
        ]

        db = get_db()
        if records:
            await db.clothing_usage.insert_many(records)
        await self.outfit_service.mark_worn(user_id, outfit_id)

        logger.debug(f"Tracked {len(records)} items for outfit {outfit_id}")
        return len(records)

    async def get_frequent(self, user_id: str, period: UsagePeriod) -> List[UsageCategory]:
        """Most-worn items in the period, grouped by category."""
        db = get_db()
        start = window_start(UsagePeriod(period).value)

        pipeline = [
            {"$match": {"user_id": user_id, "worn_at": {"$gte": start}}},
            {"$sort": {"worn_at": 1}},
            {"$group": {
                "_id": "$wardrobe_item_id",
                "item_name": {"$last": "$item_name"},
                "item_category": {"$last": "$item_category"},
                "usage_count": {"$sum": 1},
            }},
            {"$project": {
                "_id": 0,
                "wardrobe_item_id": "$_id",
                "item_name": 1,
                "item_category": 1,
                "usage_count": 1,
            }},
        ]
        rows = await db.clothing_usage.aggregate(pipeline).to_list(length=None)
        return group_usage_by_category(rows)
