"""
Scheduler Package

Background job scheduling with monitoring and error handling.
"""

from glamora.scheduler.jobs import (
    ALL_JOBS,
    ScheduledJob,
    restriction_expiry_job,
)

__all__ = [
    "ALL_JOBS",
    "ScheduledJob",
    "restriction_expiry_job",
]
