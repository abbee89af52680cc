from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from ..core.database_manager import Base
from ..core.db_utils import utcnow


class Booking(Base):
    """Immutable once inserted; removed only through the event cascade"""

    __tablename__ = "bookings"

    booking_id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer,
        ForeignKey("events.event_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attendee_name = Column(String(200), nullable=False)
    full_price_tickets_booked = Column(Integer, nullable=False, default=0)
    concession_tickets_booked = Column(Integer, nullable=False, default=0)
    total_cost = Column(Numeric(10, 2), nullable=False, default=0)
    booking_date = Column(DateTime, nullable=False, default=utcnow, index=True)

    event = relationship("Event", back_populates="bookings")

    __table_args__ = (Index("idx_booking_event_date", "event_id", "booking_date"),)
