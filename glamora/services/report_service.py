"""Report Service - Manages user reports and the restriction workflow."""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from glamora.database import get_db
from glamora.models.report import (
    CLOSED_STATUSES,
    Report,
    ReportCreate,
    ReportStatus,
    ReportUpdate,
)
from glamora.models.user import restriction_offset
from glamora.services.user_service import UserService
from glamora.utils.pagination import page_bounds
from glamora.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class ReportNotFoundError(LookupError):
    """Raised when a report, or the user it points at, does not exist."""


class ReportService:
    def __init__(self):
        self.user_service = UserService()

    async def create_report(self, reporter_id: str, request: ReportCreate) -> Report:
        """
        File a report against another user.

        Raises ValueError when reporting yourself and ReportNotFoundError when
        the reported user does not exist.
        """
        if request.reported_user_id == reporter_id:
            raise ValueError("Cannot report yourself")

        db = get_db()

        accused = await db.users.find_one(
            {"user_id": request.reported_user_id},
            {"_id": 0, "user_id": 1}
        )
        if not accused:
            raise ReportNotFoundError("Reported user not found")

        report = Report(
            report_id=str(uuid.uuid4()),
            reporter_id=reporter_id,
            reported_user_id=request.reported_user_id,
            marketplace_item_id=request.marketplace_item_id,
            reason=request.reason,
            description=request.description,
            evidence_photos=request.evidence_photos,
            status=ReportStatus.PENDING,
            created_at=utc_now(),
        )

        await db.reports.insert_one(report.model_dump())
        logger.info(
            f"Report {report.report_id} filed by {reporter_id} "
            f"against {request.reported_user_id}"
        )
        return report

    async def get_report(self, report_id: str) -> Optional[Report]:
        db = get_db()
        doc = await db.reports.find_one({"report_id": report_id}, {"_id": 0})
        if doc:
            return Report(**doc)
        return None

    async def list_reports(
        self,
        page: int = 1,
        limit: int = 10,
        status: str = "all",
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Paginated reports, newest first, with people and listing details.

        Each report gains ``reporter``, ``reported_user`` ({user_id, name,
        email}) and ``marketplace_item`` ({item_id, name, description}), or
        None where the referenced document no longer exists.
        """
        db = get_db()

        query: Dict[str, Any] = {}
        if status != "all":
            query["status"] = status

        skip, limit = page_bounds(page, limit)
        cursor = (
            db.reports.find(query, {"_id": 0})
            .sort("created_at", -1)
            .skip(skip)
            .limit(limit)
        )
        reports = await cursor.to_list(length=limit)
        total = await db.reports.count_documents(query)

        return await self._attach_references(reports), total

    async def _attach_references(self, reports: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Join user and listing summaries onto report documents."""
        if not reports:
            return reports

        db = get_db()

        user_ids = set()
        item_ids = set()
        for report in reports:
            user_ids.add(report["reporter_id"])
            user_ids.add(report["reported_user_id"])
            if report.get("marketplace_item_id"):
                item_ids.add(report["marketplace_item_id"])

        users = await db.users.find(
            {"user_id": {"$in": list(user_ids)}},
            {"_id": 0, "user_id": 1, "name": 1, "email": 1}
        ).to_list(length=None)
        users_by_id = {u["user_id"]: u for u in users}

        items_by_id: Dict[str, Dict[str, Any]] = {}
        if item_ids:
            items = await db.marketplace_items.find(
                {"item_id": {"$in": list(item_ids)}},
                {"_id": 0, "item_id": 1, "name": 1, "description": 1}
            ).to_list(length=None)
            items_by_id = {i["item_id"]: i for i in items}

        for report in reports:
            report["reporter"] = users_by_id.get(report["reporter_id"])
            report["reported_user"] = users_by_id.get(report["reported_user_id"])
            report["marketplace_item"] = items_by_id.get(report.get("marketplace_item_id"))

        return reports

    async def update_report(
        self,
        report_id: str,
        update: ReportUpdate,
        admin_id: str,
    ) -> Optional[Report]:
        """
        Record an admin review.

        Closing statuses (resolved, dismissed) stamp resolved_by and
        resolved_at; reopening clears them.
        """
        db = get_db()

        status = ReportStatus(update.status).value
        update_data: Dict[str, Any] = {
            "status": status,
            "admin_notes": update.admin_notes,
        }
        if status in CLOSED_STATUSES:
            update_data["resolved_by"] = admin_id
            update_data["resolved_at"] = utc_now()
        else:
            update_data["resolved_by"] = None
            update_data["resolved_at"] = None

        result = await db.reports.update_one(
            {"report_id": report_id},
            {"$set": update_data}
        )
        if result.matched_count == 0:
            return None

        return await self.get_report(report_id)

    async def restrict_reported_user(
        self,
        report_id: str,
        duration: Optional[str],
        reason: Optional[str],
        admin_id: str,
    ) -> Tuple[Report, datetime]:
        """
        Restrict the user named in a report and resolve the report.

        Raises ValueError for missing fields or an unknown duration (nothing
        is written in that case) and ReportNotFoundError when the report or
        its reported user is missing.

        The user is written before the report. The two writes are not atomic;
        repeating the call after a partial failure converges.
        """
        if not duration or not reason or not reason.strip():
            raise ValueError("restriction_duration and restriction_reason are required.")
        try:
            restriction_offset(duration)
        except ValueError:
            raise ValueError("Invalid restriction duration.") from None

        report = await self.get_report(report_id)
        if not report:
            raise ReportNotFoundError("Report not found.")

        reported_user = await self.user_service.get_user(report.reported_user_id)
        if not reported_user:
            raise ReportNotFoundError("Reported user not found.")

        reason = reason.strip()
        now = utc_now()

        status = await self.user_service.restrict_user(
            reported_user.user_id,
            duration,
            reason,
            restricted_by=admin_id,
            now=now,
        )

        db = get_db()
        await db.reports.update_one(
            {"report_id": report_id},
            {"$set": {
                "status": ReportStatus.RESOLVED.value,
                "resolved_by": admin_id,
                "resolved_at": now,
                "admin_notes": f"User restricted for {duration}. Reason: {reason}",
            }}
        )

        resolved = await self.get_report(report_id) or report
        return resolved, status.restriction_end_date
