import logging
from typing import Optional

from event_manager.core.database_manager import DatabaseManager
from event_manager.core.errors import InvalidInputError
from event_manager.crud import site_settings as settings_crud
from event_manager.schemas.site_settings import SiteSettings
from event_manager.utils.forms import is_blank

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get(self) -> Optional[SiteSettings]:
        """The stored site settings, or None before the first save"""
        async with self._db.get_session() as db:
            row = await settings_crud.get_site_settings(db)
            return SiteSettings.model_validate(row) if row else None

    async def upsert(
        self, site_name: Optional[str], site_description: Optional[str]
    ) -> SiteSettings:
        if is_blank(site_name) or is_blank(site_description):
            raise InvalidInputError("All fields are required")
        async with self._db.get_session() as db:
            row = await settings_crud.upsert_site_settings(
                db, str(site_name).strip(), str(site_description).strip()
            )
            saved = SiteSettings.model_validate(row)
        logger.info("Site settings updated: %s", saved.site_name)
        return saved
