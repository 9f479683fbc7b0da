import time

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from roomchat.main import app
from roomchat.realtime.room_channel import get_room_channel


@pytest.fixture
def client(session, channel):
    app.dependency_overrides[get_room_channel] = lambda: channel
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def wait_for(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            return False
        time.sleep(0.01)
    return True


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_requests_without_token_are_rejected(client, public_room):
    response = client.post(f"/api/rooms/{public_room.id}/pesan", json={"content": "hi"})
    assert response.status_code == 401

    response = client.get("/api/rooms", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_post_message_to_private_room(client, private_room, auth_headers):
    url = f"/api/rooms/{private_room.id}/pesan"

    response = client.post(url, json={"content": "hi"}, headers=auth_headers("u1"))
    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == "u1"
    assert body["room_id"] == private_room.id
    assert body["content"] == "hi"

    response = client.post(url, json={"content": "hi"}, headers=auth_headers("u2"))
    assert response.status_code == 403

    history = client.get(url, headers=auth_headers("u1")).json()
    assert history["count"] == 1


def test_post_message_error_mapping(client, public_room, auth_headers):
    headers = auth_headers("u1")

    assert client.post(f"/api/rooms/{public_room.id}/pesan", json={"content": "   "}, headers=headers).status_code == 422
    assert client.post("/api/rooms/9999/pesan", json={"content": "x"}, headers=headers).status_code == 404
    assert client.post(
        f"/api/rooms/{public_room.id}/pesan", json={"content": "x"}, headers=auth_headers("ghost")
    ).status_code == 404


def test_history_pagination(client, public_room, auth_headers):
    headers = auth_headers("u2")
    url = f"/api/rooms/{public_room.id}/pesan"
    ids = [client.post(url, json={"content": f"m{i}"}, headers=headers).json()["id"] for i in range(3)]

    page = client.get(url, params={"limit": 2}, headers=headers).json()
    assert [m["id"] for m in page["messages"]] == ids[1:]

    older = client.get(url, params={"limit": 2, "before_id": ids[1]}, headers=headers).json()
    assert [m["id"] for m in older["messages"]] == ids[:1]

    assert client.get(url, params={"limit": 0}, headers=headers).status_code == 422


def test_room_management(client, users, auth_headers):
    response = client.post("/api/rooms", json={"name": "tim", "is_private": True}, headers=auth_headers("u1"))
    assert response.status_code == 201
    room_id = response.json()["id"]

    assert client.get(f"/api/rooms/{room_id}", headers=auth_headers("u2")).status_code == 403

    participants_url = f"/api/rooms/{room_id}/participants"
    assert client.post(participants_url, json={"user_id": "u2"}, headers=auth_headers("u1")).status_code == 201
    assert client.post(participants_url, json={"user_id": "u2"}, headers=auth_headers("u1")).status_code == 409
    assert client.get(f"/api/rooms/{room_id}", headers=auth_headers("u2")).status_code == 200

    assert client.delete(f"{participants_url}/u2", headers=auth_headers("u1")).status_code == 204
    assert client.post(
        f"/api/rooms/{room_id}/pesan", json={"content": "x"}, headers=auth_headers("u2")
    ).status_code == 403


def test_websocket_receives_new_messages(client, channel, public_room, make_token, auth_headers):
    url = f"/ws/rooms/{public_room.id}?token={make_token('u2')}"

    with client.websocket_connect(url) as ws:
        hello = ws.receive_json()
        assert hello["type"] == "connection_established"
        assert hello["room_id"] == public_room.id

        response = client.post(
            f"/api/rooms/{public_room.id}/pesan", json={"content": "x"}, headers=auth_headers("u1")
        )
        assert response.status_code == 201

        event = ws.receive_json()
        assert event["type"] == "message_created"
        assert event["data"]["content"] == "x"
        assert event["data"]["id"] == response.json()["id"]

        ws.close()
        assert wait_for(lambda: channel.subscriber_count(public_room.id) == 0)


def test_websocket_rejects_non_participant(client, private_room, make_token):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect(f"/ws/rooms/{private_room.id}?token={make_token('u2')}") as ws:
            ws.receive_json()
    assert excinfo.value.code == 1008


def test_websocket_rejects_missing_token(client, public_room):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect(f"/ws/rooms/{public_room.id}") as ws:
            ws.receive_json()
    assert excinfo.value.code == 1008


def test_websocket_disconnect_releases_subscription(client, channel, public_room, make_token):
    url = f"/ws/rooms/{public_room.id}?token={make_token('u2')}"

    with client.websocket_connect(url) as ws:
        assert ws.receive_json()["type"] == "connection_established"
        assert channel.subscriber_count(public_room.id) == 1

        ws.close()
        assert wait_for(lambda: channel.subscriber_count(public_room.id) == 0)

    assert client.get(f"/health/rooms/{public_room.id}").json()["subscribers"] == 0
    assert channel.active_rooms() == []


def test_removed_participant_stops_receiving(client, channel, private_room, make_token, auth_headers):
    participants_url = f"/api/rooms/{private_room.id}/participants"
    assert client.post(participants_url, json={"user_id": "u2"}, headers=auth_headers("u1")).status_code == 201

    with client.websocket_connect(f"/ws/rooms/{private_room.id}?token={make_token('u2')}") as ws:
        assert ws.receive_json()["type"] == "connection_established"

        assert client.delete(f"{participants_url}/u2", headers=auth_headers("u1")).status_code == 204

        with pytest.raises(WebSocketDisconnect) as excinfo:
            ws.receive_json()
        assert excinfo.value.code == 1008

    response = client.post(
        f"/api/rooms/{private_room.id}/pesan", json={"content": "secret after revoke"}, headers=auth_headers("u1")
    )
    assert response.status_code == 201
    assert channel.subscriber_count(private_room.id) == 0
