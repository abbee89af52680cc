from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from event_manager.models.organiser import Organiser


async def get_organiser(db: AsyncSession, organiser_id: int) -> Optional[Organiser]:
    result = await db.execute(
        select(Organiser).filter(Organiser.organiser_id == organiser_id)
    )
    first: Optional[Organiser] = result.scalars().first()
    return first


async def get_organisers(db: AsyncSession) -> List[Organiser]:
    result = await db.execute(select(Organiser).order_by(Organiser.name))
    return list(result.scalars().all())
