"""
Glamora Database Module

MongoDB and Redis connection management.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from glamora.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# MongoDB Connection
# =============================================================================

class MongoDB:
    """MongoDB connection manager."""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None


mongo = MongoDB()


async def init_mongodb():
    """Initialize MongoDB connection and create indexes."""
    # tz_aware so stored datetimes compare against utc_now()
    mongo.client = AsyncIOMotorClient(settings.mongodb_uri, tz_aware=True)
    mongo.db = mongo.client[settings.mongodb_database]

    await mongo.db.users.create_index("user_id", unique=True)
    await mongo.db.users.create_index("email", unique=True)
    await mongo.db.users.create_index([("role", 1), ("is_active", 1)])
    await mongo.db.users.create_index([
        ("account_status.is_restricted", 1),
        ("account_status.restriction_end_date", 1)
    ])

    await mongo.db.reports.create_index("report_id", unique=True)
    await mongo.db.reports.create_index("reporter_id")
    await mongo.db.reports.create_index("reported_user_id")
    await mongo.db.reports.create_index([("status", 1), ("created_at", -1)])

    await mongo.db.marketplace_items.create_index("item_id", unique=True)
    await mongo.db.marketplace_items.create_index("user_id")
    await mongo.db.marketplace_items.create_index([("status", 1), ("created_at", -1)])

    await mongo.db.wardrobe_items.create_index("item_id", unique=True)
    await mongo.db.wardrobe_items.create_index("user_id")
    await mongo.db.wardrobe_items.create_index("category")

    await mongo.db.outfits.create_index("outfit_id", unique=True)
    await mongo.db.outfits.create_index([("user_id", 1), ("created_at", -1)])

    await mongo.db.clothing_usage.create_index("usage_id", unique=True)
    await mongo.db.clothing_usage.create_index([("user_id", 1), ("worn_at", -1)])

    await mongo.db.system_settings.create_index("key", unique=True)

    await mongo.db.admin_logs.create_index("log_id", unique=True)
    await mongo.db.admin_logs.create_index("timestamp")
    await mongo.db.admin_logs.create_index("actor_id")
    await mongo.db.admin_logs.create_index("target_id")


async def close_mongodb():
    """Close MongoDB connection."""
    if mongo.client:
        mongo.client.close()


def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    if mongo.db is None:
        raise RuntimeError("Database not initialized")
    return mongo.db


# =============================================================================
# Redis Connection
# =============================================================================

class RedisClient:
    """Redis connection manager."""

    client: Optional[redis.Redis] = None


redis_client = RedisClient()


async def init_redis():
    """Initialize Redis connection when REDIS_URL is configured."""
    if not settings.redis_url:
        logger.info("REDIS_URL not set, user cache disabled")
        return

    redis_client.client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=30,
        socket_connect_timeout=5,
        retry_on_timeout=True,
        socket_keepalive=True
    )


async def close_redis():
    """Close Redis connection."""
    if redis_client.client:
        await redis_client.client.close()


def get_redis() -> Optional[redis.Redis]:
    """Get Redis client instance, or None when the cache is disabled."""
    return redis_client.client


# =============================================================================
# Combined Initialization
# =============================================================================

async def init_db():
    """Initialize all database connections."""
    await init_mongodb()
    await init_redis()


async def close_db():
    """Close all database connections."""
    await close_mongodb()
    await close_redis()
