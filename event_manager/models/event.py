import enum

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..core.database_manager import Base
from ..core.db_utils import utcnow


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    event_date = Column(DateTime, index=True)
    full_price_tickets = Column(Integer, nullable=False, default=0)
    full_price_cost = Column(Numeric(10, 2), nullable=False, default=0)
    concession_tickets = Column(Integer, nullable=False, default=0)
    concession_cost = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(
        Enum(
            EventStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=EventStatus.DRAFT,
        index=True,
    )
    organiser_id = Column(
        Integer,
        ForeignKey("organisers.organiser_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_date = Column(DateTime, nullable=False, default=utcnow)
    published_date = Column(DateTime, nullable=True)
    last_modified = Column(DateTime, nullable=False, default=utcnow)

    organiser = relationship("Organiser", back_populates="events")
    bookings = relationship(
        "Booking",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_event_status_date", "status", "event_date"),
        Index("idx_event_status_created", "status", "created_date"),
    )
