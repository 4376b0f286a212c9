"""Marketplace Service - Listings and the admin moderation queue."""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from glamora.database import get_db
from glamora.models.marketplace_item import ItemStatus, MarketplaceItem, MarketplaceItemCreate
from glamora.utils.pagination import page_bounds
from glamora.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

OWNER_PROJECTION = {"_id": 0, "user_id": 1, "name": 1, "email": 1}


class MarketplaceService:
    """
    Marketplace listings.

    Users submit listings, which wait in the moderation queue (status
    pending) until an admin approves or rejects them.
    """

    async def create_item(self, user_id: str, request: MarketplaceItemCreate) -> MarketplaceItem:
        db = get_db()

        item = MarketplaceItem(
            item_id=str(uuid.uuid4()),
            user_id=user_id,
            status=ItemStatus.PENDING,
            created_at=utc_now(),
            **request.model_dump(),
        )
        await db.marketplace_items.insert_one(item.model_dump())
        logger.info(f"Listing {item.item_id} submitted by {user_id}")
        return item

    async def get_item(self, item_id: str) -> Optional[MarketplaceItem]:
        db = get_db()
        doc = await db.marketplace_items.find_one({"item_id": item_id}, {"_id": 0})
        if doc:
            return MarketplaceItem(**doc)
        return None

    async def list_active(self, limit: int = 50) -> List[MarketplaceItem]:
        """Approved listings visible to everyone."""
        db = get_db()
        cursor = (
            db.marketplace_items.find({"status": ItemStatus.ACTIVE.value}, {"_id": 0})
            .sort("created_at", -1)
            .limit(limit)
        )
        docs = await cursor.to_list(length=limit)
        return [MarketplaceItem(**doc) for doc in docs]

    async def list_pending(self) -> List[Dict[str, Any]]:
        """The moderation queue, newest first, with owner name and email."""
        db = get_db()
        cursor = (
            db.marketplace_items.find({"status": ItemStatus.PENDING.value}, {"_id": 0})
            .sort("created_at", -1)
        )
        items = await cursor.to_list(length=None)
        return await self._attach_owners(items)

    async def list_items(
        self,
        page: int = 1,
        limit: int = 10,
        status: str = "all",
        category: str = "all",
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Paginated listings for the admin marketplace view."""
        db = get_db()

        query: Dict[str, Any] = {}
        if status != "all":
            query["status"] = status
        if category != "all":
            query["category"] = category

        skip, limit = page_bounds(page, limit)
        cursor = (
            db.marketplace_items.find(query, {"_id": 0})
            .sort("created_at", -1)
            .skip(skip)
            .limit(limit)
        )
        items = await cursor.to_list(length=limit)
        total = await db.marketplace_items.count_documents(query)

        return await self._attach_owners(items), total

    async def _attach_owners(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not items:
            return items

        db = get_db()
        owner_ids = list({item["user_id"] for item in items})
        owners = await db.users.find(
            {"user_id": {"$in": owner_ids}},
            OWNER_PROJECTION
        ).to_list(length=None)
        owners_by_id = {o["user_id"]: o for o in owners}

        for item in items:
            item["owner"] = owners_by_id.get(item["user_id"])
        return items

    async def approve_item(self, item_id: str, admin_id: str) -> Optional[MarketplaceItem]:
        """
        Publish a listing.

        SECURITY: Admin action, must be logged.
        """
        db = get_db()
        result = await db.marketplace_items.update_one(
            {"item_id": item_id},
            {"$set": {
                "status": ItemStatus.ACTIVE.value,
                "approved_by": admin_id,
                "approved_at": utc_now(),
            }}
        )
        if result.matched_count == 0:
            return None
        return await self.get_item(item_id)

    async def reject_item(
        self,
        item_id: str,
        admin_id: str,
        reason: Optional[str] = None,
    ) -> Optional[MarketplaceItem]:
        """
        Reject a listing.

        SECURITY: Admin action, must be logged.
        """
        db = get_db()
        result = await db.marketplace_items.update_one(
            {"item_id": item_id},
            {"$set": {
                "status": ItemStatus.REJECTED.value,
                "rejection_reason": reason,
                "rejected_by": admin_id,
                "rejected_at": utc_now(),
            }}
        )
        if result.matched_count == 0:
            return None
        return await self.get_item(item_id)

    async def get_categories(self) -> Dict[str, List[str]]:
        """Distinct wardrobe categories and subcategories."""
        db = get_db()
        categories = await db.wardrobe_items.distinct("category")
        subcategories = await db.wardrobe_items.distinct("subcategory")
        return {
            "categories": sorted(c for c in categories if c),
            "subcategories": sorted(s for s in subcategories if s),
        }
