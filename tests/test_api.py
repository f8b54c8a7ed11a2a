"""End-to-end flows over HTTP."""
import pytest

from linkup.core import auth


@pytest.fixture
def people(client, auth_headers):
    for user_id, name in (("alice", "Alice"), ("bob", "Bob"), ("carol", "Carol")):
        resp = client.put(
            "/v1/profiles/me",
            json={"full_name": name, "interests": ["chess"]},
            headers=auth_headers(user_id),
        )
        assert resp.status_code == 200
    return client


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_request_accept_flow(people, auth_headers) -> None:
    client = people
    alice, bob = auth_headers("alice"), auth_headers("bob")

    resp = client.post("/v1/connections/requests", json={"receiver_id": "bob"}, headers=alice)
    assert resp.status_code == 201
    request_id = resp.json()["id"]
    assert resp.json()["status"] == "pending"

    incoming = client.get("/v1/connections/requests/incoming", headers=bob).json()
    assert [i["id"] for i in incoming["today"]] == [request_id]
    assert incoming["today"][0]["counterpart_name"] == "Alice"

    status = client.get("/v1/connections/status/bob", headers=alice).json()
    assert status == {"status": "pending_outgoing", "is_connected": False}

    resp = client.put(f"/v1/connections/requests/{request_id}", json={"action": "accept"}, headers=bob)
    assert resp.status_code == 200
    assert resp.json()["status"] == "accepted"

    feed = client.get("/v1/notifications", headers=alice).json()
    assert feed["count"] == 1
    entry = feed["notifications"][0]
    assert entry["kind"] == "connection_accepted"
    assert entry["counterpart_id"] == "bob"
    assert entry["connection_request_id"] == request_id

    for headers, other in ((alice, "bob"), (bob, "alice")):
        listing = client.get("/v1/connections", headers=headers).json()
        assert listing["count"] == 1
        assert listing["today"][0]["counterpart_id"] == other

    resp = client.put(f"/v1/notifications/{entry['notification_id']}/read", headers=alice)
    assert resp.status_code == 200
    assert client.get("/v1/notifications", headers=alice).json()["count"] == 0


def test_error_mapping(people, auth_headers) -> None:
    client = people
    alice, bob, carol = auth_headers("alice"), auth_headers("bob"), auth_headers("carol")

    resp = client.post("/v1/connections/requests", json={"receiver_id": "alice"}, headers=alice)
    assert resp.status_code == 400

    resp = client.post("/v1/connections/requests", json={"receiver_id": "ghost"}, headers=alice)
    assert resp.status_code == 404
    assert resp.json() == {"detail": "User not found"}

    request_id = client.post(
        "/v1/connections/requests", json={"receiver_id": "bob"}, headers=alice
    ).json()["id"]

    resp = client.post("/v1/connections/requests", json={"receiver_id": "alice"}, headers=bob)
    assert resp.status_code == 409

    resp = client.put(f"/v1/connections/requests/{request_id}", json={"action": "accept"}, headers=carol)
    assert resp.status_code == 403

    resp = client.put(f"/v1/connections/requests/{request_id}", json={"action": "maybe"}, headers=bob)
    assert resp.status_code == 422

    assert client.delete(f"/v1/connections/{request_id}", headers=alice).status_code == 400
    assert client.delete(f"/v1/connections/requests/{request_id}", headers=bob).status_code == 403
    assert client.delete(f"/v1/connections/requests/{request_id}", headers=alice).status_code == 200
    assert client.delete(f"/v1/connections/requests/{request_id}", headers=alice).status_code == 404


def test_messages_over_http(people, auth_headers) -> None:
    client = people
    alice, bob = auth_headers("alice"), auth_headers("bob")

    resp = client.post("/v1/messages", json={"receiver_id": "bob", "body": "hi"}, headers=alice)
    assert resp.status_code == 403

    request_id = client.post(
        "/v1/connections/requests", json={"receiver_id": "bob"}, headers=alice
    ).json()["id"]
    client.put(f"/v1/connections/requests/{request_id}", json={"action": "accept"}, headers=bob)

    resp = client.post("/v1/messages", json={"receiver_id": "bob", "body": ""}, headers=alice)
    assert resp.status_code == 400

    first = client.post("/v1/messages", json={"receiver_id": "bob", "body": "hi"}, headers=alice).json()
    second = client.post("/v1/messages", json={"receiver_id": "alice", "body": "hey"}, headers=bob).json()

    history = client.get("/v1/messages/alice", headers=bob).json()
    assert [m["id"] for m in history["messages"]] == [first["id"], second["id"]]

    assert client.get("/v1/messages/unread/count", headers=bob).json() == {"unread": 1}
    assert client.put("/v1/messages/alice/read", headers=bob).json() == {"updated": 1}


def test_auth_required(client) -> None:
    assert client.get("/v1/notifications").status_code == 401
    resp = client.get("/v1/notifications", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    resp = client.get("/v1/notifications", headers={"Authorization": "Token abc"})
    assert resp.status_code == 401


def test_header_auth_mode(client, monkeypatch) -> None:
    monkeypatch.setattr(auth, "AUTH_VERIFY_MODE", "header")

    assert client.get("/v1/notifications").status_code == 401
    resp = client.get("/v1/notifications", headers={"X-User-Id": "alice"})
    assert resp.status_code == 200
    assert resp.json() == {"count": 0, "notifications": []}
