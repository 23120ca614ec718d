"""
Тесты HTTP-границы и сборки приложения.
"""
import pytest

from booking_calendar.api import SAMPLE_BOOKING_SUMMARIES, create_app
from booking_calendar.booking.application import BookingStore
from booking_calendar.booking.infrastructure import InMemoryKeyValueStore
from booking_calendar.bootstrap import bootstrap_app


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def test_get_bookings_returns_fixed_summaries(client):
    response = client.get("/bookings")

    assert response.status_code == 200
    assert response.get_json() == SAMPLE_BOOKING_SUMMARIES
    assert set(response.get_json()[0]) == {
        "id", "customer_name", "room", "check_in", "check_out"
    }


def test_put_booking_echoes_body(client):
    body = {"customer_name": "Joe Root", "room": "104", "extra": [1, 2]}

    response = client.put("/bookings/7", json=body)

    assert response.status_code == 200
    assert response.get_json() == body


def test_put_does_not_change_listing(client):
    client.put("/bookings/1", json={"room": "105"})
    assert client.get("/bookings").get_json()[0]["room"] == "101"


def test_bootstrap_wires_store_and_app(capsys):
    kv = InMemoryKeyValueStore()

    components = bootstrap_app(kv_store=kv)

    assert isinstance(components["store"], BookingStore)
    assert len(components["store"].bookings) == 5
    assert kv.get("bookings") is not None
    assert components["app"].test_client().get("/bookings").status_code == 200
