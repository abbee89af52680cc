import pytest

from event_manager.models.event import EventStatus

pytestmark = pytest.mark.anyio

COOKIE_NAME = "organiser_session"
# Past the 64-bit INTEGER range
HUGE_ID = "99999999999999999999"


async def login(client, organiser_id: str = "1", password: str = "sarah-secret"):
    return await client.post(
        "/organiser/login", data={"organiser_id": organiser_id, "password": password}
    )


async def test_landing_and_health(client) -> None:
    response = await client.get("/")
    assert response.status_code == 200

    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["database"]["status"] == "healthy"
    assert health.json()["redis"]["status"] == "healthy"


async def test_unmatched_route(client) -> None:
    response = await client.get("/nowhere")

    assert response.status_code == 404
    assert response.text == "Route not found: GET /nowhere"


async def test_attendee_home_uses_default_settings(client, make_event) -> None:
    await make_event(title="Visible")
    await make_event(title="Secret draft", publish=False)

    response = await client.get("/attendee/")

    assert response.status_code == 200
    assert "Event Manager" in response.text
    assert "Visible" in response.text
    assert "Secret draft" not in response.text


async def test_attendee_event_detail(client, make_event) -> None:
    event = await make_event()
    draft = await make_event(publish=False)

    assert (await client.get(f"/attendee/event/{event.event_id}")).status_code == 200
    assert (await client.get(f"/attendee/event/{draft.event_id}")).status_code == 404
    assert (await client.get("/attendee/event/abc")).status_code == 404
    assert (await client.get(f"/attendee/event/{HUGE_ID}")).status_code == 404


async def test_booking_flow(client, make_event, booking_service) -> None:
    event = await make_event()

    response = await client.post(
        f"/attendee/book/{event.event_id}",
        data={
            "attendee_name": "Alice",
            "full_price_tickets": "2",
            "concession_tickets": "1",
        },
    )

    assert response.status_code == 200
    assert "33.00" in response.text
    availability = await booking_service.get_availability(event.event_id)
    assert availability.full_available == 13


async def test_booking_errors(client, make_event) -> None:
    event = await make_event()
    url = f"/attendee/book/{event.event_id}"

    no_name = await client.post(url, data={"attendee_name": "", "full_price_tickets": "1"})
    assert no_name.status_code == 400
    assert no_name.text == "Attendee name is required"

    too_many = await client.post(
        url, data={"attendee_name": "Bob", "full_price_tickets": "20"}
    )
    assert too_many.status_code == 400
    assert too_many.text == "Not enough tickets available"

    missing = await client.post(
        "/attendee/book/9999", data={"attendee_name": "Bob", "full_price_tickets": "1"}
    )
    assert missing.status_code == 404

    huge_event = await client.post(
        f"/attendee/book/{HUGE_ID}",
        data={"attendee_name": "Bob", "full_price_tickets": "1"},
    )
    assert huge_event.status_code == 404

    huge_count = await client.post(
        url, data={"attendee_name": "Bob", "full_price_tickets": HUGE_ID}
    )
    assert huge_count.status_code == 400
    assert huge_count.text == "Not enough tickets available"


async def test_organiser_pages_require_login(
    client, make_event, event_service, settings_service
) -> None:
    event = await make_event(publish=False)
    event_form = {
        "title": "Sneaky",
        "description": "Should never be saved",
        "event_date": "2030-01-01T10:00",
        "full_price_tickets": "5",
    }

    for method, path, data in [
        ("GET", "/organiser/", None),
        ("GET", "/organiser/settings", None),
        ("POST", "/organiser/settings", {"site_name": "X", "site_description": "Y"}),
        ("GET", "/organiser/create-event", None),
        ("POST", "/organiser/create-event", event_form),
        ("GET", f"/organiser/edit-event/{event.event_id}", None),
        ("POST", f"/organiser/edit-event/{event.event_id}", event_form),
        ("POST", f"/organiser/publish-event/{event.event_id}", None),
        ("POST", f"/organiser/delete-event/{event.event_id}", None),
    ]:
        response = await client.request(method, path, data=data)
        assert response.status_code == 303, f"{method} {path}"
        assert response.headers["location"] == "/organiser/login"

    (draft,) = await event_service.list_drafts()
    assert draft.event_id == event.event_id
    assert draft.title == event.title
    assert draft.description == event.description
    assert await event_service.list_published() == []
    assert await settings_service.get() is None


async def test_login_success_and_logout(client) -> None:
    response = await login(client, "2", "mike-secret")

    assert response.status_code == 303
    assert response.headers["location"] == "/organiser/"
    assert COOKIE_NAME in response.cookies

    dashboard = await client.get("/organiser/")
    assert dashboard.status_code == 200
    assert "Mike Chen" in dashboard.text

    logout = await client.post("/organiser/logout")
    assert logout.status_code == 303
    assert logout.headers["location"] == "/"
    assert (await client.get("/organiser/")).status_code == 303


async def test_login_failure_rerenders(client, redis_client) -> None:
    response = await login(client, "2", "wrong")

    assert response.status_code == 200
    assert "Incorrect password. Please try again." in response.text
    assert redis_client.data == {}

    unknown = await login(client, "77", "whatever")
    assert unknown.status_code == 200
    assert "Invalid organiser selected." in unknown.text

    huge = await login(client, HUGE_ID, "whatever")
    assert huge.status_code == 200
    assert "Invalid organiser selected." in huge.text


async def test_organiser_event_lifecycle(client, event_service) -> None:
    await login(client)

    created = await client.post(
        "/organiser/create-event",
        data={
            "title": "Beach Yoga",
            "description": "On the sand",
            "event_date": "2030-08-01T07:00",
            "full_price_tickets": "20",
            "full_price_cost": "10",
        },
    )
    assert created.status_code == 303
    assert created.headers["location"] == "/organiser/"
    (draft,) = await event_service.list_drafts()
    assert draft.title == "Beach Yoga"

    edit_page = await client.get(f"/organiser/edit-event/{draft.event_id}")
    assert edit_page.status_code == 200
    assert "2030-08-01T07:00" in edit_page.text

    edited = await client.post(
        f"/organiser/edit-event/{draft.event_id}",
        data={
            "title": "Beach Yoga at Dawn",
            "description": "On the sand",
            "event_date": "2030-08-01T06:00",
        },
    )
    assert edited.status_code == 303
    assert edited.headers["location"] == "/organiser/?updated=true"
    banner = await client.get("/organiser/?updated=true")
    assert "Event updated successfully!" in banner.text

    published = await client.post(f"/organiser/publish-event/{draft.event_id}")
    assert published.status_code == 303
    event = await event_service.get(draft.event_id)
    assert event.status == EventStatus.PUBLISHED

    deleted = await client.post(f"/organiser/delete-event/{draft.event_id}")
    assert deleted.status_code == 303
    assert await event_service.list_published() == []


async def test_organiser_validation_errors(client, make_event) -> None:
    await login(client)

    missing_fields = await client.post(
        "/organiser/create-event", data={"title": "No date", "description": "x"}
    )
    assert missing_fields.status_code == 400
    assert missing_fields.text == "Title, description, and event date are required"

    missing_event = await client.post(
        "/organiser/edit-event/9999",
        data={"title": "T", "description": "D", "event_date": "2030-01-01T10:00"},
    )
    assert missing_event.status_code == 404
    assert (await client.get("/organiser/edit-event/9999")).status_code == 404

    bad_settings = await client.post("/organiser/settings", data={"site_name": "X"})
    assert bad_settings.status_code == 400

    huge_capacity = await client.post(
        "/organiser/create-event",
        data={
            "title": "T",
            "description": "D",
            "event_date": "2030-01-01T10:00",
            "full_price_tickets": HUGE_ID,
        },
    )
    assert huge_capacity.status_code == 400
    assert huge_capacity.text == "Full price tickets is too large"
    assert (await client.get(f"/organiser/edit-event/{HUGE_ID}")).status_code == 404


async def test_publish_twice_keeps_published_date(
    client, make_event, event_service
) -> None:
    event = await make_event()
    await login(client)

    response = await client.post(f"/organiser/publish-event/{event.event_id}")

    assert response.status_code == 303
    assert (await event_service.get(event.event_id)).published_date == event.published_date


async def test_site_settings_update(client) -> None:
    await login(client)

    response = await client.post(
        "/organiser/settings",
        data={"site_name": "Yoga Studio", "site_description": "Stretch more"},
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/organiser/"

    home = await client.get("/attendee/")
    assert "Yoga Studio" in home.text
    assert "Stretch more" in home.text
