import logging
from typing import List, Optional

from event_manager.core.database_manager import DatabaseManager
from event_manager.core.errors import InvalidInputError, NotFoundError
from event_manager.crud import event as event_crud
from event_manager.schemas.event import (
    DraftEvent,
    Event,
    EventCreate,
    EventForm,
    EventWithTotals,
)
from event_manager.utils.forms import (
    is_blank,
    parse_capacity,
    parse_cost,
    parse_event_date,
)

logger = logging.getLogger(__name__)


def validate_event_form(form: EventForm) -> EventCreate:
    """
    Turn raw organiser form input into a storable event.

    Title, description and date are required; capacities and costs
    default to zero when left empty.
    """
    if is_blank(form.title) or is_blank(form.description) or is_blank(form.event_date):
        raise InvalidInputError("Title, description, and event date are required")

    return EventCreate(
        title=str(form.title).strip(),
        description=str(form.description).strip(),
        event_date=parse_event_date(str(form.event_date)),
        full_price_tickets=parse_capacity(
            form.full_price_tickets, "Full price tickets"
        ),
        full_price_cost=parse_cost(form.full_price_cost, "Full price cost"),
        concession_tickets=parse_capacity(
            form.concession_tickets, "Concession tickets"
        ),
        concession_cost=parse_cost(form.concession_cost, "Concession cost"),
    )


class EventService:
    """Organiser-side event lifecycle: draft, edit, publish, delete"""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def create(self, form: EventForm, organiser_id: Optional[int]) -> Event:
        event_in = validate_event_form(form)
        async with self._db.get_session() as db:
            db_event = await event_crud.create_event(db, event_in, organiser_id)
            event = Event.model_validate(db_event)
        logger.info(
            "Event %s created as draft by organiser %s", event.event_id, organiser_id
        )
        return event

    async def get(self, event_id: int) -> Event:
        async with self._db.get_session() as db:
            db_event = await event_crud.get_event(db, event_id)
            if db_event is None:
                raise NotFoundError("Event not found")
            return Event.model_validate(db_event)

    async def edit(self, event_id: int, form: EventForm) -> Event:
        event_in = validate_event_form(form)
        async with self._db.get_session() as db:
            db_event = await event_crud.update_event(db, event_id, event_in)
            if db_event is None:
                raise NotFoundError("Event not found")
            event = Event.model_validate(db_event)
        logger.info("Event %s edited", event_id)
        return event

    async def publish(self, event_id: int) -> bool:
        async with self._db.get_session() as db:
            published = await event_crud.publish_event(db, event_id)
        if published:
            logger.info("Event %s published", event_id)
        else:
            logger.info("Publish of event %s ignored: missing or already published", event_id)
        return published

    async def delete(self, event_id: int) -> bool:
        async with self._db.get_session() as db:
            deleted = await event_crud.delete_event(db, event_id)
        if deleted:
            logger.info("Event %s deleted", event_id)
        return deleted

    async def list_published(self) -> List[EventWithTotals]:
        async with self._db.get_session() as db:
            rows = await event_crud.get_published_events(db)
            return [EventWithTotals.from_row(row) for row in rows]

    async def list_drafts(self) -> List[DraftEvent]:
        async with self._db.get_session() as db:
            rows = await event_crud.get_draft_events(db)
            return [DraftEvent.from_row(row) for row in rows]
