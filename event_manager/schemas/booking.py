from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from .event import EventWithTotals


class BookingCreate(BaseModel):
    event_id: int
    attendee_name: str
    full_price_tickets_booked: int = 0
    concession_tickets_booked: int = 0
    total_cost: Decimal


class Booking(BookingCreate):
    booking_id: int
    booking_date: datetime

    model_config = ConfigDict(from_attributes=True)


class Availability(BaseModel):
    event: EventWithTotals
    full_available: int
    concession_available: int
