import logging
from typing import Any, List, Optional

from sqlalchemy import DateTime, Integer, Numeric, String, func, insert, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from event_manager.core.db_utils import utcnow
from event_manager.models.booking import Booking
from event_manager.models.event import Event, EventStatus
from event_manager.schemas.booking import BookingCreate

logger = logging.getLogger(__name__)


async def get_booking(db: AsyncSession, booking_id: int) -> Optional[Booking]:
    result = await db.execute(select(Booking).filter(Booking.booking_id == booking_id))
    first: Optional[Booking] = result.scalars().first()
    return first


async def get_event_bookings(db: AsyncSession, event_id: int) -> List[Booking]:
    result = await db.execute(
        select(Booking)
        .filter(Booking.event_id == event_id)
        .order_by(Booking.booking_date.asc(), Booking.booking_id.asc())
    )
    return list(result.scalars().all())


async def insert_booking_guarded(
    db: AsyncSession, booking: BookingCreate
) -> Optional[int]:
    """
    INSERT ... SELECT that only produces a row while the event is published
    and both tiers still have room for the requested tickets. Returns the new
    booking_id, or None when the guard rejected the insert.

    Availability is re-evaluated inside the statement, so a booking committed
    between the caller's read and this write cannot push a tier past capacity.
    """

    def booked(column: Any) -> Any:
        return (
            select(func.coalesce(func.sum(column), 0))
            .where(Booking.event_id == booking.event_id)
            .correlate(None)
            .scalar_subquery()
        )

    source = select(
        literal(booking.event_id, Integer),
        literal(booking.attendee_name, String),
        literal(booking.full_price_tickets_booked, Integer),
        literal(booking.concession_tickets_booked, Integer),
        literal(booking.total_cost, Numeric(10, 2)),
        literal(utcnow(), DateTime),
    ).select_from(Event).where(
        Event.event_id == booking.event_id,
        Event.status == EventStatus.PUBLISHED,
        Event.full_price_tickets - booked(Booking.full_price_tickets_booked)
        >= booking.full_price_tickets_booked,
        Event.concession_tickets - booked(Booking.concession_tickets_booked)
        >= booking.concession_tickets_booked,
    )

    stmt = (
        insert(Booking.__table__)
        .from_select(
            [
                "event_id",
                "attendee_name",
                "full_price_tickets_booked",
                "concession_tickets_booked",
                "total_cost",
                "booking_date",
            ],
            source,
        )
        .returning(Booking.__table__.c.booking_id)
    )
    result = await db.execute(stmt)
    booking_id: Optional[int] = result.scalar_one_or_none()
    if booking_id is None:
        logger.info(
            "Guarded booking insert rejected for event %s", booking.event_id
        )
    return booking_id
