from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from posbakum.core.core import Service
from posbakum.core.modules.settings.models import AppSettings
from posbakum.core.modules.settings.utils import convert_drive_link

logger = structlog.get_logger(__name__)


class SettingsService(Service):
    """Read-only branding settings with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("app_settings")
        self._settings: AppSettings | None = None

    async def get_settings(self) -> AppSettings:
        """Get settings, loading them from the database on first use.

        Defaults are served (and not cached) while the database is unreachable.
        """
        if self._settings is None:
            try:
                self._settings = await self._load()
            except PyMongoError as e:
                logger.warning("app_settings_unavailable", error=str(e))
                return AppSettings()
        return self._settings

    async def _load(self) -> AppSettings:
        defaults = AppSettings()
        doc = await self._collection.find_one({})
        if doc is None:
            return defaults

        # Empty values in the stored document fall back to defaults
        return AppSettings(
            logo_url=convert_drive_link(doc.get("logo_url") or "") or defaults.logo_url,
            court_logo_url=convert_drive_link(doc.get("court_logo_url") or "") or defaults.court_logo_url,
            lbh_name=doc.get("lbh_name") or defaults.lbh_name,
            court_name=doc.get("court_name") or defaults.court_name,
            posbakum_name=doc.get("posbakum_name") or defaults.posbakum_name,
        )
