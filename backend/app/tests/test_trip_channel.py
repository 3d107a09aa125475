"""
Tests for the real-time trip chat socket.
"""
import pytest
from fastapi import WebSocketDisconnect
from app.core.config import settings
from app.core.security import create_access_token
from app.models import TripMessage, TripVisibility
from app.tests.helpers import make_trip, make_user

SOCKET_URL = "/api/v1/ws/trips"


def _url(user) -> str:
    return f"{SOCKET_URL}?token={create_access_token(user.id)}"


def _join(ws, trip_id) -> dict:
    ws.send_json({"event": "join-trip", "data": trip_id})
    return ws.receive_json()


def _assert_nothing_pending(ws):
    """The next frame must be the reply to a fresh probe, not a stray broadcast."""
    ws.send_json({"event": "join-trip", "data": 999999})
    assert ws.receive_json() == {"event": "error", "data": "Trip not found"}


def test_connect_without_token(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect(SOCKET_URL):
            pass
    assert exc_info.value.code == 1008


def test_connect_with_invalid_token(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect(f"{SOCKET_URL}?token=garbage"):
            pass
    assert exc_info.value.code == 1008


def test_connect_with_authorization_header(client, db, user):
    trip = make_trip(db, user)
    headers = {"Authorization": f"Bearer {create_access_token(user.id)}"}
    with client.websocket_connect(SOCKET_URL, headers=headers) as ws:
        assert _join(ws, trip.id) == {"event": "joined", "data": trip.id}


def test_owner_joins_private_trip(client, db, user):
    trip = make_trip(db, user, visibility=TripVisibility.PRIVATE)
    with client.websocket_connect(_url(user)) as ws:
        assert _join(ws, trip.id) == {"event": "joined", "data": trip.id}


def test_join_unknown_trip(client, user):
    with client.websocket_connect(_url(user)) as ws:
        assert _join(ws, 4242) == {"event": "error", "data": "Trip not found"}
        assert _join(ws, "not-an-id") == {"event": "error", "data": "Trip not found"}


def test_participant_denied_on_private_trip(client, db, user, other_user):
    trip = make_trip(db, user, participants=[other_user], visibility=TripVisibility.PRIVATE)
    with client.websocket_connect(_url(other_user)) as ws:
        assert _join(ws, trip.id) == {"event": "error", "data": "Access denied"}


def test_non_participant_never_receives_messages(client, db, user, other_user):
    """A denied connection is not joined and gets none of the trip's traffic."""
    trip = make_trip(db, user, visibility=TripVisibility.PRIVATE)

    with client.websocket_connect(_url(user)) as owner, client.websocket_connect(_url(other_user)) as outsider:
        assert _join(owner, trip.id)["event"] == "joined"
        assert _join(outsider, trip.id) == {"event": "error", "data": "Access denied"}

        owner.send_json({"event": "trip-message", "data": {"tripId": trip.id, "message": "secret plan"}})
        assert owner.receive_json()["data"]["message"] == "secret plan"

        _assert_nothing_pending(outsider)


def test_message_broadcast_to_all_joined(client, db, user, other_user):
    """Every joined connection, sender included, receives the stored record."""
    trip = make_trip(db, user, participants=[other_user])

    with client.websocket_connect(_url(user)) as alice, client.websocket_connect(_url(other_user)) as bob:
        assert _join(alice, trip.id)["event"] == "joined"
        assert _join(bob, trip.id)["event"] == "joined"

        bob.send_json({"event": "trip-message", "data": {"tripId": trip.id, "message": "Dinner at 8?"}})

        for ws in (alice, bob):
            frame = ws.receive_json()
            assert frame["event"] == "trip-message"
            record = frame["data"]
            assert record["message"] == "Dinner at 8?"
            assert record["tripId"] == trip.id
            assert record["userId"] == other_user.id
            assert record["user"] == {"id": other_user.id, "fullName": "Bob Example", "email": "bob@example.com"}
            assert record["createdAt"]

    stored = db.query(TripMessage).filter(TripMessage.trip_id == trip.id).all()
    assert [m.message for m in stored] == ["Dinner at 8?"]
    assert stored[0].user_id == other_user.id


def test_messages_persist_in_order(client, db, user):
    trip = make_trip(db, user)

    with client.websocket_connect(_url(user)) as ws:
        _join(ws, trip.id)
        for text in ("one", "two", "three"):
            ws.send_json({"event": "trip-message", "data": {"tripId": trip.id, "message": text}})
            assert ws.receive_json()["data"]["message"] == text

    history = client.get(
        f"/api/v1/trips/{trip.id}/messages",
        headers={"Authorization": f"Bearer {create_access_token(user.id)}"}
    ).json()
    assert [m["message"] for m in history] == ["one", "two", "three"]


def test_publish_without_joining(client, db, user):
    trip = make_trip(db, user)
    with client.websocket_connect(_url(user)) as ws:
        ws.send_json({"event": "trip-message", "data": {"tripId": trip.id, "message": "hello"}})
        assert ws.receive_json() == {"event": "error", "data": "Access denied"}
    assert db.query(TripMessage).count() == 0


def test_malformed_message_dropped(client, db, user):
    trip = make_trip(db, user)
    with client.websocket_connect(_url(user)) as ws:
        _join(ws, trip.id)
        ws.send_json({"event": "trip-message", "data": {"tripId": trip.id}})
        ws.send_json({"event": "trip-message", "data": {"message": "no trip"}})
        ws.send_text("not json")
        ws.send_json({"event": "unknown-event", "data": 1})
        _assert_nothing_pending(ws)
    assert db.query(TripMessage).count() == 0


def test_binary_frame_ignored(client, db, user):
    trip = make_trip(db, user)
    with client.websocket_connect(_url(user)) as ws:
        ws.send_bytes(b"\x00\x01")
        assert _join(ws, trip.id) == {"event": "joined", "data": trip.id}


def test_malformed_message_strict_mode(client, db, user, monkeypatch):
    monkeypatch.setattr(settings, "TRIP_CHANNEL_STRICT_EVENTS", True)
    trip = make_trip(db, user)
    with client.websocket_connect(_url(user)) as ws:
        _join(ws, trip.id)
        ws.send_json({"event": "trip-message", "data": {"tripId": trip.id, "message": "  "}})
        assert ws.receive_json() == {"event": "error", "data": "Trip ID and message are required"}


def test_disconnect_leaves_groups(client, db, user):
    trip = make_trip(db, user)
    channel = client.app.state.trip_channel

    with client.websocket_connect(_url(user)) as ws:
        _join(ws, trip.id)
        assert channel.member_count(trip.id) == 1

    assert channel.member_count(trip.id) == 0


def test_access_change_applies_to_new_joins(client, db, user, other_user):
    """Participants added after connecting can join without reconnecting."""
    carol = make_user(db, "Carol Example", "carol@example.com")
    trip = make_trip(db, user)

    with client.websocket_connect(_url(carol)) as ws:
        assert _join(ws, trip.id)["data"] == "Access denied"
        client.post(
            f"/api/v1/trips/{trip.id}/participants",
            json={"email": carol.email},
            headers={"Authorization": f"Bearer {create_access_token(user.id)}"}
        )
        assert _join(ws, trip.id) == {"event": "joined", "data": trip.id}
