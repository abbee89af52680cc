from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from event_manager.api import deps
from event_manager.api.templating import templates
from event_manager.core.errors import AuthError
from event_manager.core.settings import Settings
from event_manager.schemas.event import EventForm
from event_manager.schemas.organiser import OrganiserSession
from event_manager.schemas.site_settings import SiteSettings
from event_manager.services.auth_service import AuthService
from event_manager.services.event_service import EventService
from event_manager.services.settings_service import SettingsService

router = APIRouter()

DASHBOARD_URL = "/organiser/"
LOGIN_URL = "/organiser/login"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def _event_form(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    event_date: Optional[str] = Form(None),
    full_price_tickets: Optional[str] = Form(None),
    full_price_cost: Optional[str] = Form(None),
    concession_tickets: Optional[str] = Form(None),
    concession_cost: Optional[str] = Form(None),
) -> EventForm:
    return EventForm(
        title=title,
        description=description,
        event_date=event_date,
        full_price_tickets=full_price_tickets,
        full_price_cost=full_price_cost,
        concession_tickets=concession_tickets,
        concession_cost=concession_cost,
    )


async def _render_login(
    request: Request, auth: AuthService, error: Optional[str] = None
) -> Any:
    return templates.TemplateResponse(
        request,
        "organiser_login.html",
        {"error": error, "organisers": await auth.list_organisers()},
    )


@router.get("/login", response_class=HTMLResponse, summary="Organiser Login Page")  # type: ignore[misc]
async def login_page(
    request: Request,
    session: Optional[OrganiserSession] = Depends(deps.get_optional_session),
    auth: AuthService = Depends(deps.get_auth_service),
) -> Any:
    if session is not None:
        return _redirect(DASHBOARD_URL)
    return await _render_login(request, auth)


@router.post("/login", response_class=HTMLResponse, summary="Organiser Login")  # type: ignore[misc]
async def login(
    request: Request,
    organiser_id: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    auth: AuthService = Depends(deps.get_auth_service),
    settings: Settings = Depends(deps.get_app_settings),
) -> Any:
    """
    **Organiser Login**

    Checks the password configured for the selected organiser and starts a
    session. Failed attempts re-render the login page with the reason.
    """
    try:
        token, _ = await auth.login(organiser_id, password)
    except AuthError as e:
        return await _render_login(request, auth, error=e.message)

    response = _redirect(DASHBOARD_URL)
    response.set_cookie(
        key=settings.security.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.security.SESSION_TTL_SECONDS,
        httponly=True,
        secure=settings.security.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.post("/logout", summary="Organiser Logout")  # type: ignore[misc]
async def logout(
    token: Optional[str] = Depends(deps.get_session_token),
    auth: AuthService = Depends(deps.get_auth_service),
    settings: Settings = Depends(deps.get_app_settings),
) -> Any:
    await auth.logout(token)
    response = _redirect("/")
    response.delete_cookie(settings.security.SESSION_COOKIE_NAME)
    return response


@router.get("/", response_class=HTMLResponse, summary="Organiser Dashboard")  # type: ignore[misc]
async def dashboard(
    request: Request,
    updated: Optional[str] = None,
    session: OrganiserSession = Depends(deps.require_auth),
    auth: AuthService = Depends(deps.get_auth_service),
    events: EventService = Depends(deps.get_event_service),
    site: SiteSettings = Depends(deps.get_site_settings),
) -> Any:
    return templates.TemplateResponse(
        request,
        "organiser_home.html",
        {
            "current_organiser": await auth.get_organiser(session.organiser_id),
            "session": session,
            "settings": site,
            "published_events": await events.list_published(),
            "draft_events": await events.list_drafts(),
            "success_message": "Event updated successfully!" if updated else None,
        },
    )


@router.get("/settings", response_class=HTMLResponse, summary="Site Settings Form")  # type: ignore[misc]
async def settings_page(
    request: Request,
    session: OrganiserSession = Depends(deps.require_auth),
    site_settings: SettingsService = Depends(deps.get_settings_service),
) -> Any:
    # Blank form until the first save; the defaults are display-only
    current = await site_settings.get()
    return templates.TemplateResponse(
        request, "site_settings.html", {"settings": current}
    )


@router.post("/settings", summary="Update Site Settings")  # type: ignore[misc]
async def update_settings(
    site_name: Optional[str] = Form(None),
    site_description: Optional[str] = Form(None),
    session: OrganiserSession = Depends(deps.require_auth),
    site_settings: SettingsService = Depends(deps.get_settings_service),
) -> Any:
    await site_settings.upsert(site_name, site_description)
    return _redirect(DASHBOARD_URL)


@router.get("/create-event", response_class=HTMLResponse, summary="New Event Form")  # type: ignore[misc]
async def create_event_page(
    request: Request,
    session: OrganiserSession = Depends(deps.require_auth),
) -> Any:
    return templates.TemplateResponse(
        request, "edit_event.html", {"event": None, "action": "/organiser/create-event"}
    )


@router.post("/create-event", summary="Create Draft Event")  # type: ignore[misc]
async def create_event(
    session: OrganiserSession = Depends(deps.require_auth),
    form: EventForm = Depends(_event_form),
    events: EventService = Depends(deps.get_event_service),
) -> Any:
    await events.create(form, session.organiser_id)
    return _redirect(DASHBOARD_URL)


@router.get("/edit-event/{event_id}", response_class=HTMLResponse, summary="Edit Event Form")  # type: ignore[misc]
async def edit_event_page(
    request: Request,
    session: OrganiserSession = Depends(deps.require_auth),
    event_id: int = Depends(deps.parse_event_id),
    events: EventService = Depends(deps.get_event_service),
) -> Any:
    event = await events.get(event_id)
    return templates.TemplateResponse(
        request,
        "edit_event.html",
        {"event": event, "action": f"/organiser/edit-event/{event_id}"},
    )


@router.post("/edit-event/{event_id}", summary="Update Event")  # type: ignore[misc]
async def edit_event(
    session: OrganiserSession = Depends(deps.require_auth),
    event_id: int = Depends(deps.parse_event_id),
    form: EventForm = Depends(_event_form),
    events: EventService = Depends(deps.get_event_service),
) -> Any:
    await events.edit(event_id, form)
    return _redirect(f"{DASHBOARD_URL}?updated=true")


@router.post("/publish-event/{event_id}", summary="Publish Event")  # type: ignore[misc]
async def publish_event(
    session: OrganiserSession = Depends(deps.require_auth),
    event_id: int = Depends(deps.parse_event_id),
    events: EventService = Depends(deps.get_event_service),
) -> Any:
    await events.publish(event_id)
    return _redirect(DASHBOARD_URL)


@router.post("/delete-event/{event_id}", summary="Delete Event")  # type: ignore[misc]
async def delete_event(
    session: OrganiserSession = Depends(deps.require_auth),
    event_id: int = Depends(deps.parse_event_id),
    events: EventService = Depends(deps.get_event_service),
) -> Any:
    await events.delete(event_id)
    return _redirect(DASHBOARD_URL)
