import logging

import pytest

from event_manager.core.settings import DatabaseSettings, SecuritySettings, Settings
from event_manager.main import create_app, lifespan
from event_manager.services.auth_service import AuthService


def _settings(secret) -> Settings:
    return Settings(
        ENVIRONMENT="test",
        TESTING=True,
        SEED_DEFAULTS=False,
        security=SecuritySettings(SESSION_SECRET=secret),
    )


def test_missing_session_secret_warns(caplog, redis_client) -> None:
    with caplog.at_level(logging.WARNING, logger="event_manager.main"):
        first = create_app(_settings(None), redis_client=redis_client)
        second = create_app(_settings(""), redis_client=redis_client)

    warnings = [r for r in caplog.records if "SECURITY_SESSION_SECRET" in r.getMessage()]
    assert len(warnings) == 2
    assert all(r.levelno == logging.WARNING for r in warnings)
    assert first.state.sessions.secret
    assert first.state.sessions.secret != second.state.sessions.secret


def test_configured_session_secret_is_used(caplog, redis_client) -> None:
    with caplog.at_level(logging.WARNING, logger="event_manager.main"):
        app = create_app(_settings("fixed-secret"), redis_client=redis_client)

    assert app.state.sessions.secret == "fixed-secret"
    assert not [r for r in caplog.records if "SECURITY_SESSION_SECRET" in r.getMessage()]


@pytest.mark.anyio
async def test_startup_creates_schema_on_fresh_database(tmp_path, redis_client) -> None:
    settings = Settings(
        ENVIRONMENT="test",
        TESTING=True,
        database=DatabaseSettings(URL=f"sqlite+aiosqlite:///{tmp_path / 'fresh.db'}"),
        security=SecuritySettings(SESSION_SECRET="fixed-secret"),
    )
    app = create_app(settings, redis_client=redis_client)

    async with lifespan(app):
        organisers = await AuthService(app.state.db, app.state.sessions, {}).list_organisers()

    assert [o.name for o in organisers] == ["Mike Chen", "Sarah Johnson"]
