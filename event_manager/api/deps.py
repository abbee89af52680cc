from typing import Optional

from fastapi import Depends, Request

from ..core.database_manager import DatabaseManager
from ..core.errors import NotFoundError, UnauthenticatedError
from ..core.sessions import SessionStore
from ..core.settings import Settings
from ..schemas.organiser import OrganiserSession
from ..schemas.site_settings import SiteSettings, resolve_site_settings
from ..services.auth_service import AuthService
from ..services.booking_service import BookingService
from ..services.event_service import EventService
from ..services.settings_service import SettingsService
from ..utils.forms import parse_id


def get_app_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def get_db_manager(request: Request) -> DatabaseManager:
    db: DatabaseManager = request.app.state.db
    return db


def get_session_store(request: Request) -> SessionStore:
    sessions: SessionStore = request.app.state.sessions
    return sessions


def get_booking_service(
    db: DatabaseManager = Depends(get_db_manager),
) -> BookingService:
    return BookingService(db)


def get_event_service(db: DatabaseManager = Depends(get_db_manager)) -> EventService:
    return EventService(db)


def get_settings_service(
    db: DatabaseManager = Depends(get_db_manager),
) -> SettingsService:
    return SettingsService(db)


def get_auth_service(
    db: DatabaseManager = Depends(get_db_manager),
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(db, sessions, settings.security.ORGANISER_PASSWORDS)


def get_session_token(
    request: Request, settings: Settings = Depends(get_app_settings)
) -> Optional[str]:
    return request.cookies.get(settings.security.SESSION_COOKIE_NAME)


async def get_optional_session(
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[OrganiserSession]:
    return await auth.current_session(token)


async def require_auth(
    session: Optional[OrganiserSession] = Depends(get_optional_session),
) -> OrganiserSession:
    """Gate for organiser pages; unauthenticated requests go to the login page"""
    if session is None:
        raise UnauthenticatedError()
    return session


async def get_site_settings(
    service: SettingsService = Depends(get_settings_service),
) -> SiteSettings:
    return resolve_site_settings(await service.get())


def parse_event_id(event_id: str) -> int:
    # Ids that cannot name a row are unknown events, not malformed requests
    parsed = parse_id(event_id)
    if parsed is None:
        raise NotFoundError("Event not found")
    return parsed
