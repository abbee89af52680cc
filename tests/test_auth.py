from datetime import timedelta

import pytest

from event_manager.core import security
from event_manager.core.errors import IncorrectPasswordError, UnknownOrganiserError
from event_manager.core.sessions import SessionStore
from event_manager.services.auth_service import AuthService

pytestmark = pytest.mark.anyio


async def test_login_creates_session(auth_service, redis_client) -> None:
    token, session = await auth_service.login("2", "mike-secret")

    assert session.organiser_id == 2
    assert session.organiser_name == "Mike Chen"
    assert session.is_authenticated is True
    current = await auth_service.current_session(token)
    assert current == session
    (key,) = redis_client.data
    assert key.startswith("session:")
    assert redis_client.expiry[key] == 3600


async def test_wrong_password_leaves_no_session(auth_service, redis_client) -> None:
    with pytest.raises(IncorrectPasswordError, match="Incorrect password"):
        await auth_service.login(2, "sarah-secret")

    assert redis_client.data == {}


@pytest.mark.parametrize(
    "organiser_id", ["99", "abc", None, "0", "-1", "99999999999999999999"]
)
async def test_unknown_organiser(auth_service, organiser_id) -> None:
    with pytest.raises(UnknownOrganiserError, match="Invalid organiser selected"):
        await auth_service.login(organiser_id, "whatever")


async def test_organiser_without_password_cannot_log_in(
    db_manager, session_store
) -> None:
    auth = AuthService(db_manager, session_store, {1: "sarah-secret"})

    with pytest.raises(IncorrectPasswordError):
        await auth.login(2, "")


async def test_logout_is_idempotent(auth_service) -> None:
    token, _ = await auth_service.login(1, "sarah-secret")

    await auth_service.logout(token)
    await auth_service.logout(token)
    await auth_service.logout(None)

    assert await auth_service.current_session(token) is None


async def test_tampered_and_foreign_tokens_are_ignored(
    auth_service, redis_client
) -> None:
    token, _ = await auth_service.login(1, "sarah-secret")
    foreign = SessionStore(redis_client, "another-secret", ttl_seconds=60)

    assert await foreign.get(token) is None
    assert await auth_service.current_session(token + "x") is None
    assert await auth_service.current_session("not-a-token") is None


async def test_expired_token_is_rejected(session_store) -> None:
    token = security.create_session_token(
        "some-session", session_store.secret, timedelta(seconds=-1)
    )

    assert security.decode_session_token(token, session_store.secret) is None
    assert await session_store.get(token) is None


def test_password_comparison() -> None:
    assert security.verify_organiser_password("s3cret", "s3cret") is True
    assert security.verify_organiser_password("s3cret", "S3cret") is False
    assert security.verify_organiser_password(None, "") is False
    assert security.verify_organiser_password("", "") is False
    assert security.verify_organiser_password("s3cret", None) is False


async def test_list_organisers_ordered_by_name(auth_service) -> None:
    organisers = await auth_service.list_organisers()

    assert [o.name for o in organisers] == ["Mike Chen", "Sarah Johnson"]
