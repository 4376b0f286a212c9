"""Audit Service - Audit logging for moderation actions."""

import logging
import uuid
from typing import Optional, Dict, Any, List

from glamora.database import get_db
from glamora.models.admin_log import AdminLog, ActorType
from glamora.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class AuditService:
    """
    Audit logging service.

    SECURITY: All moderation actions are logged for accountability.
    Logs include:
    - Admin actions (restrict, deactivate, approve/reject, settings)
    - System actions (restriction expiry)
    """

    async def log(
        self,
        actor_type: ActorType,
        actor_id: str,
        action: str,
        actor_email: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        before_state: Optional[Dict[str, Any]] = None,
        after_state: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AdminLog:
        """
        Log an action.

        Args:
            actor_type: user, admin, or system
            actor_id: ID of the actor
            action: Name of the action
            actor_email: Email if known (for admin actions)
            target_type: Type of target (user, report, marketplace_item, settings)
            target_id: ID of the target
            before_state: State before the action
            after_state: State after the action
            metadata: Additional context
        """
        db = get_db()

        log_entry = AdminLog(
            log_id=str(uuid.uuid4()),
            timestamp=utc_now(),
            actor_type=actor_type,
            actor_id=actor_id,
            actor_email=actor_email,
            action=action,
            target_type=target_type,
            target_id=target_id,
            before_state=before_state,
            after_state=after_state,
            metadata=metadata,
        )

        await db.admin_logs.insert_one(log_entry.model_dump())
        logger.info(
            f"audit: {log_entry.actor_type}:{actor_id} {action} "
            f"{target_type or '-'}:{target_id or '-'}"
        )

        return log_entry

    async def log_admin_action(
        self,
        admin_id: str,
        action: str,
        admin_email: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        reason: Optional[str] = None,
        before_state: Optional[Dict[str, Any]] = None,
        after_state: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AdminLog]:
        """
        Log an admin action.

        A failed audit write is logged and swallowed; the moderation action it
        describes has already been applied.
        """
        meta = dict(metadata or {})
        if reason:
            meta["reason"] = reason

        try:
            return await self.log(
                actor_type=ActorType.ADMIN,
                actor_id=admin_id,
                actor_email=admin_email,
                action=action,
                target_type=target_type,
                target_id=target_id,
                before_state=before_state,
                after_state=after_state,
                metadata=meta or None,
            )
        except Exception:
            logger.exception(f"Failed to write audit entry for {action} on {target_id}")
            return None

    async def log_system_action(
        self,
        action: str,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AdminLog]:
        """Log an action taken by a background job."""
        try:
            return await self.log(
                actor_type=ActorType.SYSTEM,
                actor_id="system",
                action=action,
                target_type=target_type,
                target_id=target_id,
                metadata=metadata,
            )
        except Exception:
            logger.exception(f"Failed to write audit entry for system action {action}")
            return None

    async def get_logs(
        self,
        limit: int = 50,
        actor_type: Optional[ActorType] = None,
        target_id: Optional[str] = None,
    ) -> List[AdminLog]:
        """Get audit entries, newest first."""
        db = get_db()

        query: Dict[str, Any] = {}
        if actor_type:
            query["actor_type"] = actor_type.value
        if target_id:
            query["target_id"] = target_id

        cursor = db.admin_logs.find(query, {"_id": 0}).sort("timestamp", -1).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [AdminLog(**doc) for doc in docs]

    async def get_recent_admin_actions(self, limit: int = 50) -> List[AdminLog]:
        """Get recent admin actions for dashboard."""
        return await self.get_logs(limit=limit, actor_type=ActorType.ADMIN)

    async def get_user_history(self, user_id: str, limit: int = 50) -> List[AdminLog]:
        """Get every audit entry that targets a user."""
        return await self.get_logs(limit=limit, target_id=user_id)
