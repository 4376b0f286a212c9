"""User Service - User profiles, admin account management and restrictions."""

import json
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from glamora.database import get_db, get_redis
from glamora.models.user import (
    AccountStatus,
    AdminUserUpdate,
    User,
    UserRole,
    UserUpdate,
    restriction_offset,
)
from glamora.utils.pagination import page_bounds
from glamora.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

# Cache configuration
USER_CACHE_TTL = 300  # 5 minutes
USER_CACHE_PREFIX = "user:"

# Never leave the database
USER_PROJECTION = {"_id": 0, "password_hash": 0}

CLEARED_RESTRICTION = AccountStatus().model_dump()


class UserService:
    """
    User profile, account management and restriction service.
    """

    def _cache_key(self, user_id: str) -> str:
        """Generate cache key for user."""
        return f"{USER_CACHE_PREFIX}{user_id}"

    async def _get_from_cache(self, user_id: str) -> Optional[User]:
        """Get user from Redis cache."""
        redis = get_redis()
        if not redis:
            return None

        try:
            cached = await redis.get(self._cache_key(user_id))
            if cached:
                return User(**json.loads(cached))
        except Exception as e:
            logger.debug(f"Cache miss for {user_id}: {e}")
        return None

    async def _set_cache(self, user: User):
        """Cache user in Redis."""
        redis = get_redis()
        if not redis:
            return

        try:
            await redis.setex(
                self._cache_key(user.user_id),
                USER_CACHE_TTL,
                user.model_dump_json()
            )
        except Exception as e:
            logger.debug(f"Cache set failed: {e}")

    async def _invalidate_cache(self, user_id: str):
        """Remove user from cache."""
        redis = get_redis()
        if not redis:
            return

        try:
            await redis.delete(self._cache_key(user_id))
        except Exception as e:
            logger.warning(f"Cache invalidation failed for {user_id}: {e}")

    # =========================================================================
    # Lookups
    # =========================================================================

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID (cached for 5 min)."""
        cached = await self._get_from_cache(user_id)
        if cached:
            return cached

        db = get_db()
        doc = await db.users.find_one({"user_id": user_id}, USER_PROJECTION)
        if doc:
            user = User(**doc)
            await self._set_cache(user)
            return user
        return None

    async def get_user_stats(self, user_id: str) -> Dict[str, int]:
        """Counts shown on the admin user detail view."""
        db = get_db()
        return {
            "wardrobe_items": await db.wardrobe_items.count_documents({"user_id": user_id}),
            "marketplace_items": await db.marketplace_items.count_documents({"user_id": user_id}),
            "reports_received": await db.reports.count_documents({"reported_user_id": user_id}),
            "reports_submitted": await db.reports.count_documents({"reporter_id": user_id}),
        }

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        role: str = "all",
        status: str = "all",
    ) -> Tuple[List[User], int]:
        """
        Paginated user listing for the admin dashboard.

        search matches name or email case-insensitively. Members only unless
        an explicit role is given; status "all" disables that filter, otherwise
        it is "active"/"inactive".
        """
        db = get_db()

        query: Dict[str, Any] = {"role": UserRole.USER.value}
        if search:
            regex = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{"name": regex}, {"email": regex}]
        if role != "all":
            query["role"] = role
        if status != "all":
            query["is_active"] = status == "active"

        skip, limit = page_bounds(page, limit)
        cursor = (
            db.users.find(query, USER_PROJECTION)
            .sort("created_at", -1)
            .skip(skip)
            .limit(limit)
        )
        docs = await cursor.to_list(length=limit)
        total = await db.users.count_documents(query)

        return [User(**doc) for doc in docs], total

    # =========================================================================
    # Self-service updates
    # =========================================================================

    async def update_profile(self, user_id: str, update: UserUpdate) -> Optional[User]:
        """
        Update user profile.

        SECURITY: Only allowed fields can be updated via UserUpdate model.
        Raises ValueError if the new email belongs to another account.
        """
        db = get_db()

        update_data = {
            k: v for k, v in update.model_dump().items()
            if v is not None
        }

        if not update_data:
            return await self.get_user(user_id)

        if "email" in update_data:
            update_data["email"] = update_data["email"].lower()
            taken = await db.users.find_one(
                {"email": update_data["email"], "user_id": {"$ne": user_id}},
                {"_id": 0, "user_id": 1}
            )
            if taken:
                raise ValueError("Email is already in use")

        update_data["updated_at"] = utc_now()

        result = await db.users.update_one(
            {"user_id": user_id},
            {"$set": update_data}
        )

        if result.matched_count == 0:
            return None

        await self._invalidate_cache(user_id)
        return await self.get_user(user_id)

    # =========================================================================
    # Admin account management
    # =========================================================================

    async def admin_update_user(self, user_id: str, update: AdminUserUpdate) -> Optional[User]:
        """
        Change role and/or active flag.

        SECURITY: Admin action, must be logged.
        """
        db = get_db()

        update_data: Dict[str, Any] = {}
        if update.role is not None:
            update_data["role"] = UserRole(update.role).value
        if update.is_active is not None:
            update_data["is_active"] = update.is_active

        if not update_data:
            return await self.get_user(user_id)

        update_data["updated_at"] = utc_now()

        result = await db.users.update_one(
            {"user_id": user_id},
            {"$set": update_data}
        )
        if result.matched_count == 0:
            return None

        await self._invalidate_cache(user_id)
        return await self.get_user(user_id)

    async def deactivate_user(self, user_id: str) -> bool:
        """
        Soft delete: mark the account inactive instead of removing it.

        SECURITY: Admin action, must be logged.
        """
        db = get_db()

        result = await db.users.update_one(
            {"user_id": user_id},
            {"$set": {"is_active": False, "updated_at": utc_now()}}
        )
        await self._invalidate_cache(user_id)
        return result.matched_count > 0

    # =========================================================================
    # Restrictions
    # =========================================================================

    async def restrict_user(
        self,
        user_id: str,
        duration: str,
        reason: str,
        restricted_by: str,
        now: Optional[datetime] = None,
    ) -> AccountStatus:
        """
        Restrict a user for one of the fixed durations.

        Overwrites any existing restriction. Raises ValueError for an unknown
        duration literal before anything is written.

        SECURITY: Admin action, must be logged.
        """
        offset = restriction_offset(duration)
        now = now or utc_now()

        status = AccountStatus(
            is_active=True,
            is_restricted=True,
            restriction_reason=reason,
            restriction_start_date=now,
            restriction_end_date=now + offset,
            restriction_duration=duration,
            restricted_by=restricted_by,
        )

        db = get_db()
        await db.users.update_one(
            {"user_id": user_id},
            {"$set": {
                "account_status": status.model_dump(),
                "updated_at": now
            }}
        )
        await self._invalidate_cache(user_id)

        logger.info(
            f"User {user_id} restricted for {duration} until "
            f"{status.restriction_end_date.isoformat()} by {restricted_by}"
        )
        return status

    async def lift_restriction(self, user_id: str) -> bool:
        """Clear a restriction before its end date."""
        db = get_db()

        result = await db.users.update_one(
            {"user_id": user_id},
            {"$set": {
                "account_status": CLEARED_RESTRICTION,
                "updated_at": utc_now()
            }}
        )
        await self._invalidate_cache(user_id)
        return result.matched_count > 0

    async def check_restriction_expired(self, user: User) -> bool:
        """
        Check if a restriction has expired and clear it if so.

        Returns True if the user is no longer restricted.
        """
        status = user.account_status
        if not status.is_restricted:
            return True

        now = utc_now()
        if status.is_in_force(now):
            return False

        db = get_db()
        await db.users.update_one(
            {"user_id": user.user_id, "account_status.is_restricted": True},
            {"$set": {
                "account_status": CLEARED_RESTRICTION,
                "updated_at": now
            }}
        )
        await self._invalidate_cache(user.user_id)
        logger.info(f"Restriction on {user.user_id} expired and was lifted")
        return True

    async def lift_expired_restrictions(self) -> List[str]:
        """
        Clear every restriction whose end date has passed.

        Returns the affected user IDs.
        """
        db = get_db()
        now = utc_now()

        query = {
            "account_status.is_restricted": True,
            "account_status.restriction_end_date": {"$lte": now},
        }
        docs = await db.users.find(query, {"_id": 0, "user_id": 1}).to_list(length=None)
        user_ids = [doc["user_id"] for doc in docs]

        if not user_ids:
            return []

        await db.users.update_many(
            {"user_id": {"$in": user_ids}, "account_status.is_restricted": True},
            {"$set": {
                "account_status": CLEARED_RESTRICTION,
                "updated_at": now
            }}
        )
        for user_id in user_ids:
            await self._invalidate_cache(user_id)

        return user_ids
