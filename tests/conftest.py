"""Pytest conftest to make repository importable during tests."""
import sys
from pathlib import Path
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Optional

import httpx
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    # Insert at front so local package imports resolve
    sys.path.insert(0, str(REPO_ROOT))

from event_manager.core.database_manager import DatabaseManager  # noqa: E402
from event_manager.core.sessions import SessionStore  # noqa: E402
from event_manager.core.settings import (  # noqa: E402
    DatabaseSettings,
    SecuritySettings,
    Settings,
)
from event_manager.schemas.event import Event, EventForm  # noqa: E402
from event_manager.services.auth_service import AuthService  # noqa: E402
from event_manager.services.booking_service import BookingService  # noqa: E402
from event_manager.services.event_service import EventService  # noqa: E402
from event_manager.services.settings_service import SettingsService  # noqa: E402

ORGANISER_PASSWORDS = {1: "sarah-secret", 2: "mike-secret"}
SESSION_SECRET = "test-session-secret"


class InMemoryRedis:
    """The subset of the redis.asyncio client the session store relies on"""

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}
        self.expiry: Dict[str, Optional[int]] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        ENVIRONMENT="test",
        TESTING=True,
        SEED_DEFAULTS=False,
        database=DatabaseSettings(URL=f"sqlite+aiosqlite:///{tmp_path / 'events.db'}"),
        security=SecuritySettings(
            SESSION_SECRET=SESSION_SECRET,
            ORGANISER_PASSWORDS=ORGANISER_PASSWORDS,
        ),
    )


@pytest.fixture
async def db_manager(settings: Settings) -> AsyncGenerator[DatabaseManager, None]:
    manager = DatabaseManager(settings.database)
    await manager.create_all()
    await manager.seed_defaults()
    yield manager
    await manager.close()


@pytest.fixture
def redis_client() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture
def session_store(redis_client: InMemoryRedis) -> SessionStore:
    return SessionStore(redis_client, SESSION_SECRET, ttl_seconds=3600)


@pytest.fixture
def event_service(db_manager: DatabaseManager) -> EventService:
    return EventService(db_manager)


@pytest.fixture
def booking_service(db_manager: DatabaseManager) -> BookingService:
    return BookingService(db_manager)


@pytest.fixture
def settings_service(db_manager: DatabaseManager) -> SettingsService:
    return SettingsService(db_manager)


@pytest.fixture
def auth_service(
    db_manager: DatabaseManager, session_store: SessionStore
) -> AuthService:
    return AuthService(db_manager, session_store, ORGANISER_PASSWORDS)


@pytest.fixture
def make_event(
    event_service: EventService,
) -> Callable[..., Awaitable[Event]]:
    """Factory for events; published unless told otherwise"""

    async def _make_event(publish: bool = True, **overrides: Any) -> Event:
        fields: Dict[str, Any] = {
            "title": "Puppy Yoga",
            "description": "Yoga with puppies",
            "event_date": "2030-06-01T10:00",
            "full_price_tickets": "15",
            "full_price_cost": "12.50",
            "concession_tickets": "5",
            "concession_cost": "8.00",
        }
        fields.update(overrides)
        event = await event_service.create(EventForm(**fields), organiser_id=1)
        if publish:
            await event_service.publish(event.event_id)
            event = await event_service.get(event.event_id)
        return event

    return _make_event


@pytest.fixture
async def client(
    settings: Settings, db_manager: DatabaseManager, redis_client: InMemoryRedis
) -> AsyncGenerator[httpx.AsyncClient, None]:
    from event_manager.main import create_app

    app = create_app(settings, redis_client=redis_client)
    app.state.db = db_manager
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
