from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database_manager import Base

if TYPE_CHECKING:
    from .event import Event


class Organiser(Base):
    """Reference data; passwords are configured per organiser_id, never stored"""

    __tablename__ = "organisers"

    organiser_id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    events: Mapped[List["Event"]] = relationship(
        "Event", back_populates="organiser", passive_deletes=True
    )
