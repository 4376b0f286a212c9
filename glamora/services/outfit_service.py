"""Outfit Service - Saved outfits owned by a user."""

import logging
import uuid
from typing import List, Optional

from pymongo import ReturnDocument

from glamora.database import get_db
from glamora.models.outfit import Outfit, OutfitCreate
from glamora.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class OutfitService:
    """
    Outfit history.

    Every lookup is scoped to the owner; another user's outfit behaves as
    missing.
    """

    async def create_outfit(self, user_id: str, request: OutfitCreate) -> Outfit:
        db = get_db()

        outfit = Outfit(
            outfit_id=str(uuid.uuid4()),
            user_id=user_id,
            outfit_name=request.outfit_name,
            outfit_items=request.outfit_items,
            occasion=request.occasion,
            weather=request.weather,
            notes=request.notes,
            is_favorite=False,
            created_at=utc_now(),
        )
        await db.outfits.insert_one(outfit.model_dump())
        logger.debug(f"Outfit {outfit.outfit_id} saved for {user_id}")
        return outfit

    async def list_outfits(self, user_id: str, limit: int = 200) -> List[Outfit]:
        """Outfits ordered by the date they were last worn (or created), newest first."""
        db = get_db()
        pipeline = [
            {"$match": {"user_id": user_id}},
            {"$addFields": {"history_date": {"$ifNull": ["$worn_date", "$created_at"]}}},
            {"$sort": {"history_date": -1}},
            {"$limit": limit},
            {"$project": {"_id": 0, "history_date": 0}},
        ]
        docs = await db.outfits.aggregate(pipeline).to_list(length=limit)
        return [Outfit(**doc) for doc in docs]

    async def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        db = get_db()
        doc = await db.outfits.find_one(
            {"outfit_id": outfit_id, "user_id": user_id},
            {"_id": 0}
        )
        if doc:
            return Outfit(**doc)
        return None

    async def toggle_favorite(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        """Flip is_favorite and return the updated outfit."""
        db = get_db()
        doc = await db.outfits.find_one_and_update(
            {"outfit_id": outfit_id, "user_id": user_id},
            [{"$set": {"is_favorite": {"$not": ["$is_favorite"]}}}],
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )
        if doc:
            return Outfit(**doc)
        return None

    async def mark_worn(self, user_id: str, outfit_id: str) -> None:
        db = get_db()
        await db.outfits.update_one(
            {"outfit_id": outfit_id, "user_id": user_id},
            {"$set": {"worn_date": utc_now()}}
        )

    async def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        db = get_db()
        result = await db.outfits.delete_one({"outfit_id": outfit_id, "user_id": user_id})
        return result.deleted_count > 0
