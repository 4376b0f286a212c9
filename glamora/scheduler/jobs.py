"""
Scheduled Jobs for the Glamora backend

Background maintenance jobs with:
- Error handling and logging
- Job status tracking for the admin dashboard
"""

import logging

from glamora.services.audit_service import AuditService
from glamora.services.user_service import UserService
from glamora.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

# Failures before a job is reported unhealthy
FAILURE_ALERT_THRESHOLD = 3


class ScheduledJob:
    """Base class for scheduled jobs with error handling and logging."""

    def __init__(self, name: str):
        self.name = name
        self.execution_count = 0
        self.failure_count = 0
        self.last_execution = None
        self.last_error = None

    async def execute(self):
        """Execute the job with error handling and metrics."""
        self.execution_count += 1
        start_time = utc_now()

        try:
            logger.info(f"[{self.name}] Starting execution #{self.execution_count}")
            await self._run()
            self.last_execution = utc_now()
            duration = (self.last_execution - start_time).total_seconds()
            logger.info(f"[{self.name}] Completed successfully in {duration:.2f}s")

        except Exception as e:
            self.failure_count += 1
            self.last_error = str(e)
            logger.error(f"[{self.name}] Failed: {e}", exc_info=True)

            if self.failure_count >= FAILURE_ALERT_THRESHOLD:
                logger.critical(
                    f"[{self.name}] CRITICAL: Failed {self.failure_count} times. "
                    f"Last error: {e}"
                )

    async def _run(self):
        """Override this method in subclasses."""
        raise NotImplementedError

    def status(self) -> dict:
        return {
            "name": self.name,
            "execution_count": self.execution_count,
            "failure_count": self.failure_count,
            "last_execution": (
                self.last_execution.isoformat() if self.last_execution else None
            ),
            "last_error": self.last_error,
            "health": "healthy" if self.failure_count < FAILURE_ALERT_THRESHOLD else "unhealthy",
        }

    def reset(self):
        self.execution_count = 0
        self.failure_count = 0
        self.last_error = None


class RestrictionExpiryJob(ScheduledJob):
    """
    Lift restrictions whose end date has passed.

    Requests from a restricted user already lift an expired restriction on
    the fly; this sweep catches users who never come back, so the dashboard
    counts stay right.
    """

    def __init__(self):
        super().__init__("RestrictionExpiry")
        self.user_service = UserService()
        self.audit_service = AuditService()
        self.lifted_total = 0

    async def _run(self):
        user_ids = await self.user_service.lift_expired_restrictions()
        if not user_ids:
            logger.debug(f"[{self.name}] No expired restrictions")
            return

        self.lifted_total += len(user_ids)
        for user_id in user_ids:
            await self.audit_service.log_system_action(
                action="restriction_expired",
                target_type="user",
                target_id=user_id,
            )
        logger.info(f"[{self.name}] Lifted {len(user_ids)} expired restrictions")

    def status(self) -> dict:
        data = super().status()
        data["lifted_total"] = self.lifted_total
        return data


restriction_expiry_job = RestrictionExpiryJob()

ALL_JOBS = [restriction_expiry_job]
