"""Glamora Routers Package"""

from glamora.routers import (
    auth,
    users,
    reports,
    marketplace,
    outfits,
    clothing_usage,
    admin,
    scheduler,
)

__all__ = [
    "auth",
    "users",
    "reports",
    "marketplace",
    "outfits",
    "clothing_usage",
    "admin",
    "scheduler",
]
