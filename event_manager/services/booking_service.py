import logging
from decimal import Decimal
from typing import Optional

from event_manager.core.database_manager import DatabaseManager
from event_manager.core.db_utils import db_transaction
from event_manager.core.errors import (
    InsufficientAvailabilityError,
    InvalidInputError,
    NotFoundError,
)
from event_manager.crud import booking as booking_crud
from event_manager.crud import event as event_crud
from event_manager.models.event import EventStatus
from event_manager.schemas.booking import Availability, Booking, BookingCreate
from event_manager.schemas.event import EventWithTotals
from event_manager.utils.forms import parse_ticket_count

logger = logging.getLogger(__name__)


class BookingService:
    """
    Availability checks and ticket booking for published events.

    A booking is the only write this service performs. The availability
    check and the insert share one transaction, and the insert itself
    re-checks capacity, so concurrent bookings cannot oversell a tier.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_availability(self, event_id: int) -> Availability:
        async with self._db.get_session() as db:
            row = await event_crud.get_event_with_totals(
                db, event_id, status=EventStatus.PUBLISHED
            )
        if row is None:
            raise NotFoundError("Event not found or not published")
        event = EventWithTotals.from_row(row)
        return Availability(
            event=event,
            full_available=event.full_available,
            concession_available=event.concession_available,
        )

    async def create_booking(
        self,
        event_id: int,
        attendee_name: Optional[str],
        full_price_tickets: Optional[str],
        concession_tickets: Optional[str],
    ) -> Booking:
        name = (attendee_name or "").strip()
        if not name:
            raise InvalidInputError("Attendee name is required")

        full_wanted = parse_ticket_count(full_price_tickets)
        concession_wanted = parse_ticket_count(concession_tickets)
        if full_wanted + concession_wanted == 0:
            raise InvalidInputError("Please select at least one ticket")

        async with self._db.get_session() as db:
            async with db_transaction(db):
                row = await event_crud.get_event_with_totals(
                    db, event_id, status=EventStatus.PUBLISHED, for_update=True
                )
                if row is None:
                    raise NotFoundError("Event not found")
                event = EventWithTotals.from_row(row)

                if (
                    full_wanted > event.full_available
                    or concession_wanted > event.concession_available
                ):
                    logger.info(
                        "Booking rejected for event %s: wanted %d/%d, available %d/%d",
                        event_id,
                        full_wanted,
                        concession_wanted,
                        event.full_available,
                        event.concession_available,
                    )
                    raise InsufficientAvailabilityError(
                        full_available=event.full_available,
                        concession_available=event.concession_available,
                    )

                total_cost = (
                    full_wanted * Decimal(event.full_price_cost)
                    + concession_wanted * Decimal(event.concession_cost)
                )
                booking_id = await booking_crud.insert_booking_guarded(
                    db,
                    BookingCreate(
                        event_id=event_id,
                        attendee_name=name,
                        full_price_tickets_booked=full_wanted,
                        concession_tickets_booked=concession_wanted,
                        total_cost=total_cost,
                    ),
                )
                if booking_id is None:
                    raise InsufficientAvailabilityError()

            db_booking = await booking_crud.get_booking(db, booking_id)
            booking = Booking.model_validate(db_booking)

        logger.info(
            "Booking %s created for event %s: %d full, %d concession, total %s",
            booking.booking_id,
            event_id,
            full_wanted,
            concession_wanted,
            booking.total_cost,
        )
        return booking
