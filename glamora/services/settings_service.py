"""Settings Service - Persisted community and moderation settings."""

from glamora.database import get_db
from glamora.models.system_settings import SETTINGS_KEY, SystemSettings, SystemSettingsUpdate
from glamora.utils.timezone_utils import utc_now


class SettingsService:
    async def get_settings(self) -> SystemSettings:
        """Stored settings merged over the defaults."""
        db = get_db()
        doc = await db.system_settings.find_one({"key": SETTINGS_KEY}, {"_id": 0, "key": 0})
        return SystemSettings(**(doc or {}))

    async def update_settings(self, update: SystemSettingsUpdate, admin_id: str) -> SystemSettings:
        """
        Apply a partial update and return the resulting settings.

        SECURITY: Admin action, must be logged.
        """
        db = get_db()

        changes = update.model_dump(exclude_none=True)
        changes["updated_by"] = admin_id
        changes["updated_at"] = utc_now()

        await db.system_settings.update_one(
            {"key": SETTINGS_KEY},
            {"$set": changes},
            upsert=True
        )
        return await self.get_settings()
