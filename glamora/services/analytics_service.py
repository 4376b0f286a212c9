"""Analytics Service - Dashboard metrics and monthly aggregates."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from glamora.database import get_db
from glamora.models.marketplace_item import ItemStatus
from glamora.models.report import ReportStatus
from glamora.models.user import UserRole
from glamora.utils.timezone_utils import utc_now, window_start

ANALYTICS_PERIODS = ("1month", "3months", "6months", "1year")


def monthly_counts_pipeline(
    start: datetime,
    end: datetime,
    extra_match: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Aggregation that counts documents per calendar month of created_at."""
    match: Dict[str, Any] = {"created_at": {"$gte": start, "$lte": end}}
    if extra_match:
        match.update(extra_match)

    return [
        {"$match": match},
        {"$group": {
            "_id": {
                "year": {"$year": "$created_at"},
                "month": {"$month": "$created_at"},
            },
            "count": {"$sum": 1},
        }},
        {"$sort": {"_id.year": 1, "_id.month": 1}},
        {"$project": {
            "_id": 0,
            "year": "$_id.year",
            "month": "$_id.month",
            "count": 1,
        }},
    ]


TOP_CATEGORIES_PIPELINE = [
    {"$group": {"_id": "$category", "count": {"$sum": 1}}},
    {"$sort": {"count": -1}},
    {"$limit": 10},
    {"$project": {"_id": 0, "category": "$_id", "count": 1}},
]


class AnalyticsService:
    async def get_metrics(self) -> Dict[str, int]:
        """Headline counters for the dashboard."""
        db = get_db()
        user_role = UserRole.USER.value

        return {
            "total_users": await db.users.count_documents({"role": user_role}),
            "active_users": await db.users.count_documents({"role": user_role, "is_active": True}),
            "restricted_users": await db.users.count_documents({
                "account_status.is_restricted": True,
                "account_status.restriction_end_date": {"$gt": utc_now()},
            }),
            "total_reports": await db.reports.count_documents({}),
            "pending_reports": await db.reports.count_documents({"status": ReportStatus.PENDING.value}),
            "active_listings": await db.marketplace_items.count_documents({"status": ItemStatus.ACTIVE.value}),
            "pending_posts": await db.marketplace_items.count_documents({"status": ItemStatus.PENDING.value}),
        }

    async def get_analytics(self, period: str = "6months") -> Dict[str, Any]:
        """
        Month-bucketed activity inside the period plus top wardrobe categories.

        Raises ValueError for an unknown period.
        """
        if period not in ANALYTICS_PERIODS:
            raise ValueError(f"period must be one of {', '.join(ANALYTICS_PERIODS)}")

        db = get_db()
        end = utc_now()
        start = window_start(period, end)

        user_registrations = await db.users.aggregate(
            monthly_counts_pipeline(start, end, {"role": UserRole.USER.value})
        ).to_list(length=None)
        marketplace_activity = await db.marketplace_items.aggregate(
            monthly_counts_pipeline(start, end)
        ).to_list(length=None)
        reports_over_time = await db.reports.aggregate(
            monthly_counts_pipeline(start, end)
        ).to_list(length=None)
        top_categories = await db.wardrobe_items.aggregate(
            TOP_CATEGORIES_PIPELINE
        ).to_list(length=None)

        return {
            "user_registrations": user_registrations,
            "marketplace_activity": marketplace_activity,
            "reports_over_time": reports_over_time,
            "top_categories": top_categories,
            "period": period,
            "start_date": start,
            "end_date": end,
        }
