from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from event_manager.models.site_settings import SINGLETON_SETTING_ID, SiteSettings


async def get_site_settings(db: AsyncSession) -> Optional[SiteSettings]:
    result = await db.execute(
        select(SiteSettings).order_by(SiteSettings.setting_id).limit(1)
    )
    first: Optional[SiteSettings] = result.scalars().first()
    return first


async def upsert_site_settings(
    db: AsyncSession, site_name: str, site_description: str
) -> SiteSettings:
    """Insert the singleton row or replace it wholesale"""
    db_settings = await db.merge(
        SiteSettings(
            setting_id=SINGLETON_SETTING_ID,
            site_name=site_name,
            site_description=site_description,
        )
    )
    await db.commit()
    await db.refresh(db_settings)
    return db_settings
