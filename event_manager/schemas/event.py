from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from ..models.event import EventStatus


class EventForm(BaseModel):
    """Raw organiser form input; every field arrives as text"""

    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[str] = None
    full_price_tickets: Optional[str] = None
    full_price_cost: Optional[str] = None
    concession_tickets: Optional[str] = None
    concession_cost: Optional[str] = None


class EventBase(BaseModel):
    title: str
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    full_price_tickets: int = 0
    full_price_cost: Decimal = Decimal("0.00")
    concession_tickets: int = 0
    concession_cost: Decimal = Decimal("0.00")


class EventCreate(EventBase):
    pass


class Event(EventBase):
    event_id: int
    status: EventStatus
    organiser_id: Optional[int] = None
    created_date: datetime
    published_date: Optional[datetime] = None
    last_modified: datetime

    model_config = ConfigDict(from_attributes=True)


class EventWithTotals(Event):
    """A listed event annotated with its aggregated bookings"""

    organiser_name: Optional[str] = None
    full_booked: int = 0
    concession_booked: int = 0

    @classmethod
    def from_row(cls, row: Any) -> "EventWithTotals":
        """Build from an (Event, organiser_name, full_booked, concession_booked) row"""
        return cls(
            **Event.model_validate(row.Event).model_dump(),
            organiser_name=row.organiser_name,
            full_booked=row.full_booked,
            concession_booked=row.concession_booked,
        )

    @property
    def full_available(self) -> int:
        return self.full_price_tickets - self.full_booked

    @property
    def concession_available(self) -> int:
        return self.concession_tickets - self.concession_booked


class DraftEvent(Event):
    organiser_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Any) -> "DraftEvent":
        return cls(
            **Event.model_validate(row.Event).model_dump(),
            organiser_name=row.organiser_name,
        )
