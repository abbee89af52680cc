from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from event_manager.api import deps
from event_manager.api.templating import templates
from event_manager.schemas.site_settings import SiteSettings
from event_manager.services.booking_service import BookingService
from event_manager.services.event_service import EventService

router = APIRouter()


@router.get("/", response_class=HTMLResponse, summary="Published Events")  # type: ignore[misc]
async def attendee_home(
    request: Request,
    events: EventService = Depends(deps.get_event_service),
    site: SiteSettings = Depends(deps.get_site_settings),
) -> Any:
    """Published events, soonest first, with remaining tickets per tier"""
    return templates.TemplateResponse(
        request,
        "attendee_home.html",
        {"settings": site, "events": await events.list_published()},
    )


@router.get("/event/{event_id}", response_class=HTMLResponse, summary="Event Detail")  # type: ignore[misc]
async def attendee_event(
    request: Request,
    event_id: int = Depends(deps.parse_event_id),
    bookings: BookingService = Depends(deps.get_booking_service),
) -> Any:
    availability = await bookings.get_availability(event_id)
    return templates.TemplateResponse(
        request, "attendee_event.html", {"availability": availability}
    )


@router.post("/book/{event_id}", response_class=HTMLResponse, summary="Book Tickets")  # type: ignore[misc]
async def book_tickets(
    request: Request,
    event_id: int = Depends(deps.parse_event_id),
    attendee_name: Optional[str] = Form(None),
    full_price_tickets: Optional[str] = Form(None),
    concession_tickets: Optional[str] = Form(None),
    bookings: BookingService = Depends(deps.get_booking_service),
    events: EventService = Depends(deps.get_event_service),
) -> Any:
    """
    **Book Tickets**

    Books full-price and concession tickets for a published event.

    **Errors:**
    - `400`: Missing attendee name, no tickets selected, or not enough tickets left
    - `404`: Event missing or not published
    """
    booking = await bookings.create_booking(
        event_id, attendee_name, full_price_tickets, concession_tickets
    )
    event = await events.get(event_id)
    return templates.TemplateResponse(
        request, "booking_confirmation.html", {"booking": booking, "event": event}
    )
