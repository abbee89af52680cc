from typing import Any, Optional

from sqlalchemy import Row, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from event_manager.core.db_utils import utcnow
from event_manager.models.booking import Booking
from event_manager.models.event import Event, EventStatus
from event_manager.models.organiser import Organiser
from event_manager.schemas.event import EventCreate


def _booked(column: Any) -> Any:
    return (
        select(func.coalesce(func.sum(column), 0))
        .where(Booking.event_id == Event.event_id)
        .scalar_subquery()
    )


def _events_with_totals() -> Select:
    """Events joined to their organiser name and summed booking totals"""
    return select(
        Event,
        Organiser.name.label("organiser_name"),
        _booked(Booking.full_price_tickets_booked).label("full_booked"),
        _booked(Booking.concession_tickets_booked).label("concession_booked"),
    ).outerjoin(Organiser, Event.organiser_id == Organiser.organiser_id)


async def get_event(db: AsyncSession, event_id: int) -> Optional[Event]:
    result = await db.execute(select(Event).filter(Event.event_id == event_id))
    first: Optional[Event] = result.scalars().first()
    return first


async def get_event_with_totals(
    db: AsyncSession,
    event_id: int,
    status: Optional[EventStatus] = None,
    for_update: bool = False,
) -> Optional[Row]:
    query = _events_with_totals().filter(Event.event_id == event_id)
    if status is not None:
        query = query.filter(Event.status == status)
    if for_update:
        query = query.with_for_update(of=Event)
    result = await db.execute(query)
    return result.first()


async def get_published_events(db: AsyncSession) -> list[Row]:
    result = await db.execute(
        _events_with_totals()
        .filter(Event.status == EventStatus.PUBLISHED)
        .order_by(Event.event_date.asc(), Event.event_id.asc())
    )
    return list(result.all())


async def get_draft_events(db: AsyncSession) -> list[Row]:
    result = await db.execute(
        select(Event, Organiser.name.label("organiser_name"))
        .outerjoin(Organiser, Event.organiser_id == Organiser.organiser_id)
        .filter(Event.status == EventStatus.DRAFT)
        .order_by(Event.created_date.desc(), Event.event_id.desc())
    )
    return list(result.all())


async def create_event(
    db: AsyncSession, event: EventCreate, organiser_id: Optional[int]
) -> Event:
    db_event = Event(
        **event.model_dump(),
        status=EventStatus.DRAFT,
        organiser_id=organiser_id,
    )
    db.add(db_event)
    await db.commit()
    await db.refresh(db_event)
    return db_event


async def update_event(
    db: AsyncSession, event_id: int, event: EventCreate
) -> Optional[Event]:
    db_event = await get_event(db, event_id)
    if db_event:
        for key, value in event.model_dump().items():
            setattr(db_event, key, value)
        db_event.last_modified = utcnow()
        await db.commit()
        await db.refresh(db_event)
    return db_event


async def publish_event(db: AsyncSession, event_id: int) -> bool:
    """Move a draft to published; anything else is left untouched"""
    result = await db.execute(
        update(Event)
        .where(Event.event_id == event_id, Event.status == EventStatus.DRAFT)
        .values(status=EventStatus.PUBLISHED, published_date=utcnow())
    )
    await db.commit()
    return bool(result.rowcount)


async def delete_event(db: AsyncSession, event_id: int) -> bool:
    # Bookings go with the event through ON DELETE CASCADE
    result = await db.execute(delete(Event).where(Event.event_id == event_id))
    await db.commit()
    return bool(result.rowcount)
