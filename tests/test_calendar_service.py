"""Tests for the calendar REST service."""
import pytest
from fastapi.testclient import TestClient

from services.calendar_service.app import app


@pytest.fixture
def calendar(make_controller):
    return make_controller()


@pytest.fixture
def client(calendar):
    with TestClient(app) as test_client:
        # Swap the lifespan's session for one on the fake clock
        test_client.app.state.calendar.shutdown()
        test_client.app.state.calendar = calendar
        yield test_client


def _create(client: TestClient, **overrides) -> dict:
    body = {"title": "Standup", "date": "2024-01-10", "time": "09:00", "description": "Daily sync"}
    body.update(overrides)
    response = client.post("/events", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "calendar-service"}


def test_create_and_fetch_event(client: TestClient) -> None:
    created = _create(client, attachments=["agenda.pdf"])

    assert created["title"] == "Standup"
    assert created["notifications_enabled"] is True
    assert created["attachments"] == ["agenda.pdf"]

    fetched = client.get(f"/events/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created
    assert client.get("/events").json() == [created]


@pytest.mark.parametrize("missing", ["title", "date", "time"])
def test_create_rejects_empty_required_field(client: TestClient, missing: str) -> None:
    body = {"title": "Standup", "date": "2024-01-10", "time": "09:00", missing: ""}

    response = client.post("/events", json=body)

    assert response.status_code == 422
    assert client.get("/events").json() == []


def test_create_arms_notification(client: TestClient, calendar, loop) -> None:
    created = _create(client)

    loop.advance(3600)

    notifications = client.get("/notifications").json()
    assert len(notifications) == 1
    assert notifications[0]["id"] == created["id"]
    assert notifications[0]["title"] == "Standup"
    assert notifications[0]["time"].startswith("2024-01-10T09:00:00")


def test_create_accepts_time_with_utc_offset(client: TestClient) -> None:
    created = _create(client, date="2024-01-11", time="09:00Z")

    assert created["time"] == "09:00Z"
    assert client.get("/events").json() == [created]


def test_get_unknown_event_is_404(client: TestClient) -> None:
    assert client.get("/events/12345").status_code == 404


def test_patch_updates_given_fields(client: TestClient) -> None:
    created = _create(client)

    response = client.patch(f"/events/{created['id']}", json={"time": "10:00"})

    assert response.status_code == 200
    body = response.json()
    assert body["time"] == "10:00"
    assert body["title"] == "Standup"
    assert body["description"] == "Daily sync"


def test_patch_rejects_blanking_required_field(client: TestClient) -> None:
    created = _create(client)
    assert client.patch(f"/events/{created['id']}", json={"title": ""}).status_code == 422


def test_patch_unknown_event_is_404(client: TestClient) -> None:
    assert client.patch("/events/999", json={"title": "x"}).status_code == 404


def test_delete_is_idempotent(client: TestClient) -> None:
    created = _create(client)

    assert client.delete(f"/events/{created['id']}").status_code == 204
    assert client.delete(f"/events/{created['id']}").status_code == 204
    assert client.get("/events").json() == []


def test_search(client: TestClient) -> None:
    _create(client)
    _create(client, title="Dentist", date="2024-02-03", description="")

    assert client.get("/events/search", params={"q": "STAND"}).json()["results"][0]["title"] == "Standup"
    assert [e["title"] for e in client.get("/events/search", params={"q": "2024-02"}).json()["results"]] == ["Dentist"]
    assert client.get("/events/search", params={"q": ""}).json() == {"query": "", "results": []}


def test_month_grid(client: TestClient) -> None:
    _create(client)

    grid = client.get("/calendar/month").json()

    assert grid["title"] == "January 2024"
    assert grid["headers"][0] == "Sun"
    assert grid["leading_blanks"] == 1
    assert len(grid["days"]) == 31
    assert [e["title"] for e in grid["days"][9]["events"]] == ["Standup"]


def test_show_calendar_text(client: TestClient) -> None:
    assert "No events in January 2024" in client.get("/calendar/show").json()["formatted_calendar"]

    _create(client)
    text = client.get("/calendar/show").json()["formatted_calendar"]

    assert "JANUARY 2024" in text
    assert "Standup" in text
    assert "Total: 1 event(s)" in text


def test_snooze_and_dismiss(client: TestClient, loop, notifier) -> None:
    created = _create(client)
    loop.advance(3600)

    assert client.post(f"/notifications/{created['id']}/snooze").json() == {"scheduled": True}
    assert client.post("/notifications/1/snooze").json() == {"scheduled": False}

    assert client.delete(f"/notifications/{created['id']}").status_code == 204
    assert client.get("/notifications").json() == []

    loop.advance(300)
    assert notifier.shown[-1].tag == f"snoozed-{created['id']}"


def test_deleting_event_clears_its_notifications(client: TestClient, loop) -> None:
    created = _create(client)
    loop.advance(3600)

    client.delete(f"/events/{created['id']}")

    assert client.get("/notifications").json() == []


def test_permission_roundtrip(client: TestClient, loop) -> None:
    assert client.get("/notifications/permission").json() == {"permission": "granted"}

    response = client.put("/notifications/permission", json={"permission": "denied"})
    assert response.json() == {"permission": "denied"}

    _create(client)
    loop.advance(3600)
    assert client.get("/notifications").json() == []

    assert client.put("/notifications/permission", json={"permission": "maybe"}).status_code == 422
