"""Integration tests exercising API endpoints via FastAPI's TestClient."""

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

from app.models import User, UserRole


def register_user(
    client: TestClient,
    login: str,
    password: str,
    display_name: str = "Test",
) -> dict[str, Any]:
    response = client.post(
        "/api/auth/register",
        json={"login": login, "password": password, "display_name": display_name},
    )
    assert response.status_code == 201, response.text
    return response.json()


def login_user(client: TestClient, login: str, password: str) -> str:
    response = client.post(
        "/api/auth/login",
        json={"login": login, "password": password},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    return body["access_token"]


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def promote(session_factory, user_id: int) -> None:
    with session_factory() as session:
        user = session.get(User, user_id)
        user.role = UserRole.ADMIN
        session.commit()


def setup_board(client: TestClient, session_factory) -> dict[str, Any]:
    admin = register_user(client, "admin", "adminpassword", "Admin")
    promote(session_factory, admin["id"])
    alice = register_user(client, "alice", "wonderland", "Alice")
    bob = register_user(client, "bob", "builderpass", "Bob")

    tokens = {
        "admin": login_user(client, "admin", "adminpassword"),
        "alice": login_user(client, "alice", "wonderland"),
        "bob": login_user(client, "bob", "builderpass"),
    }

    response = client.post(
        "/api/categories",
        json={"name": "Community", "description": "Talk about anything"},
        headers=auth_headers(tokens["admin"]),
    )
    assert response.status_code == 201, response.text
    category = response.json()

    response = client.post(
        "/api/channels",
        json={"category_id": category["id"], "name": "General Chat"},
        headers=auth_headers(tokens["alice"]),
    )
    assert response.status_code == 201, response.text
    channel = response.json()

    return {
        "users": {"admin": admin, "alice": alice, "bob": bob},
        "tokens": tokens,
        "category": category,
        "channel": channel,
    }


def test_register_and_login_flow(client: TestClient):
    """End-to-end flow for registering and logging in a user."""

    payload = {"login": "alice", "password": "wonderland", "display_name": "Alice"}
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201
    data = response.json()
    assert data["login"] == "alice"
    assert data["role"] == "user"

    duplicate = client.post("/api/auth/register", json=payload)
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "conflict"

    login_response = client.post(
        "/api/auth/login", json={"login": "alice", "password": "wonderland"}
    )
    assert login_response.status_code == 200
    token_data = login_response.json()
    assert token_data["token_type"] == "bearer"

    me = client.get("/api/auth/me", headers=auth_headers(token_data["access_token"]))
    assert me.status_code == 200
    assert me.json()["login"] == "alice"

    bad_login = client.post("/api/auth/login", json={"login": "alice", "password": "wrongpass"})
    assert bad_login.status_code == 401


def test_health_endpoint(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_directory_permissions_and_conflicts(client: TestClient, session_factory):
    """Categories are admin-only; channel names are unique within a category."""

    board = setup_board(client, session_factory)
    tokens = board["tokens"]
    assert board["channel"]["name"] == "general-chat"

    response = client.post(
        "/api/categories", json={"name": "Rogue"}, headers=auth_headers(tokens["alice"])
    )
    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"

    response = client.post(
        "/api/channels",
        json={"category_id": board["category"]["id"], "name": "general   CHAT"},
        headers=auth_headers(tokens["bob"]),
    )
    assert response.status_code == 409

    response = client.post(
        "/api/channels", json={"name": "orphan"}, headers=auth_headers(tokens["bob"])
    )
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_argument"

    response = client.patch(
        f"/api/channels/{board['channel']['id']}",
        json={"name": "stolen"},
        headers=auth_headers(tokens["bob"]),
    )
    assert response.status_code == 403

    response = client.delete(
        f"/api/categories/{board['category']['id']}", headers=auth_headers(tokens["admin"])
    )
    assert response.status_code == 409

    listing = client.get("/api/categories")
    assert listing.status_code == 200
    assert listing.json()[0]["channels"][0]["name"] == "general-chat"


def test_threaded_discussion_with_reactions_and_moderation(client: TestClient, session_factory):
    """Post, reply, react, notify and moderate through the HTTP surface."""

    board = setup_board(client, session_factory)
    tokens = board["tokens"]
    channel_id = board["channel"]["id"]

    response = client.post("/api/messages", json={"channel_id": channel_id, "content": "hi"})
    assert response.status_code == 401

    response = client.post(
        "/api/messages", json={"content": "where am I"}, headers=auth_headers(tokens["alice"])
    )
    assert response.status_code == 400

    response = client.post(
        "/api/messages",
        json={"channel_id": channel_id, "content": "Hello @bob, welcome aboard"},
        headers=auth_headers(tokens["alice"]),
    )
    assert response.status_code == 201, response.text
    root = response.json()
    assert root["thread_reply_count"] == 0
    assert root["like_count"] == 0

    response = client.post(
        f"/api/threads/{root['id']}",
        json={"content": "Thanks, happy to be here"},
        headers=auth_headers(tokens["bob"]),
    )
    assert response.status_code == 201, response.text
    reply = response.json()
    assert reply["channel_id"] == channel_id
    assert reply["thread_id"] == root["id"]

    response = client.post(
        f"/api/threads/{reply['id']}",
        json={"content": "nested"},
        headers=auth_headers(tokens["alice"]),
    )
    assert response.status_code == 400

    toggle = {"message_id": root["id"], "emoji_code": "👍"}
    added = client.post("/api/reactions", json=toggle, headers=auth_headers(tokens["bob"]))
    assert added.status_code == 201
    assert added.json()["action"] == "added"
    assert added.json()["reaction"]["user"]["login"] == "bob"

    removed = client.post("/api/reactions", json=toggle, headers=auth_headers(tokens["bob"]))
    assert removed.status_code == 200
    assert removed.json() == {"action": "removed", "reaction": None}

    again = client.post("/api/reactions", json=toggle, headers=auth_headers(tokens["bob"]))
    assert again.status_code == 201

    missing = client.post(
        "/api/reactions", json={"message_id": root["id"]}, headers=auth_headers(tokens["bob"])
    )
    assert missing.status_code == 400

    reactions = client.get("/api/reactions", params={"message_id": root["id"]})
    assert [item["emoji_code"] for item in reactions.json()] == ["👍"]

    response = client.get(
        "/api/messages", params={"channel_id": channel_id}, headers=auth_headers(tokens["bob"])
    )
    assert response.status_code == 200
    roots = response.json()
    assert [item["id"] for item in roots] == [root["id"]]
    assert roots[0]["thread_reply_count"] == 1
    assert roots[0]["like_count"] == 1
    assert roots[0]["reactions"][0]["reacted"] is True

    assert client.get("/api/messages").status_code == 400
    popular = client.get("/api/messages", params={"popular": "true"})
    assert [item["id"] for item in popular.json()] == [root["id"]]

    thread = client.get(f"/api/threads/{root['id']}").json()
    assert thread["thread_message"]["id"] == root["id"]
    assert [item["id"] for item in thread["replies"]] == [reply["id"]]

    search = client.get("/api/search", params={"q": "welcome"})
    assert search.status_code == 200
    assert search.json()["messages"][0]["id"] == root["id"]
    assert client.get("/api/search", params={"q": "w"}).status_code == 400

    bob_inbox = client.get("/api/notifications", headers=auth_headers(tokens["bob"])).json()
    assert [item["type"] for item in bob_inbox] == ["mention"]
    assert bob_inbox[0]["metadata"]["message_id"] == root["id"]

    alice_inbox = client.get("/api/notifications", headers=auth_headers(tokens["alice"])).json()
    assert {item["type"] for item in alice_inbox} == {"reaction"}

    response = client.request(
        "DELETE", f"/api/messages/{reply['id']}", headers=auth_headers(tokens["alice"])
    )
    assert response.status_code == 403

    response = client.request(
        "DELETE", f"/api/messages/{reply['id']}", headers=auth_headers(tokens["admin"])
    )
    assert response.status_code == 400

    response = client.request(
        "DELETE",
        f"/api/messages/{reply['id']}",
        json={"custom_reason": "Off-topic", "admin_notes": "first warning"},
        headers=auth_headers(tokens["admin"]),
    )
    assert response.status_code == 204

    deleted = client.get(f"/api/messages/{reply['id']}", headers=auth_headers(tokens["bob"]))
    assert deleted.status_code == 200
    assert deleted.json()["deleted_at"] is not None
    assert deleted.json()["deletion_custom_reason"] == "Off-topic"

    thread = client.get(f"/api/threads/{root['id']}").json()
    assert thread["replies"] == []
    assert thread["thread_message"]["thread_reply_count"] == 0

    response = client.post(
        "/api/reactions",
        json={"message_id": reply["id"], "emoji_code": "👍"},
        headers=auth_headers(tokens["alice"]),
    )
    assert response.status_code == 404

    bob_inbox = client.get(
        "/api/notifications", params={"unread_only": "true"}, headers=auth_headers(tokens["bob"])
    ).json()
    moderation_notice = next(item for item in bob_inbox if item["type"] == "moderation")
    assert moderation_notice["title"] == "Reply removed"
    assert moderation_notice["message"].endswith("Reason: Off-topic")

    own_logs = client.get("/api/moderation/logs/me", headers=auth_headers(tokens["bob"])).json()
    assert len(own_logs) == 1
    assert own_logs[0]["content_type"] == "board_reply"
    assert own_logs[0]["is_notification_sent"] is True

    assert client.get("/api/moderation/logs", headers=auth_headers(tokens["alice"])).status_code == 403
    all_logs = client.get("/api/moderation/logs", headers=auth_headers(tokens["admin"]))
    assert all_logs.status_code == 200
    assert len(all_logs.json()) == 1

    marked = client.post("/api/notifications/read-all", headers=auth_headers(tokens["bob"]))
    assert marked.json()["count"] == 2

    listing = client.get("/api/categories").json()
    assert listing[0]["channels"][0]["message_count"] == 1


def test_self_delete_and_channel_cleanup(client: TestClient, session_factory):
    board = setup_board(client, session_factory)
    tokens = board["tokens"]
    channel_id = board["channel"]["id"]

    posted = client.post(
        "/api/messages",
        json={"channel_id": channel_id, "content": "short lived"},
        headers=auth_headers(tokens["alice"]),
    ).json()

    response = client.delete(f"/api/channels/{channel_id}", headers=auth_headers(tokens["alice"]))
    assert response.status_code == 409

    response = client.delete(f"/api/messages/{posted['id']}", headers=auth_headers(tokens["alice"]))
    assert response.status_code == 204

    deleted = client.get(f"/api/messages/{posted['id']}", headers=auth_headers(tokens["alice"])).json()
    assert deleted["deletion_reason_id"] is not None
    assert client.get("/api/moderation/logs/me", headers=auth_headers(tokens["alice"])).json() == []

    reasons = client.get("/api/moderation/reasons").json()
    assert [item["name"] for item in reasons] == ["self-delete"]

    response = client.delete(f"/api/channels/{channel_id}", headers=auth_headers(tokens["alice"]))
    assert response.status_code == 204
    kept = client.get(f"/api/messages/{posted['id']}", headers=auth_headers(tokens["alice"]))
    assert kept.status_code == 200
    assert kept.json()["deleted_at"] is not None
    assert client.get("/api/messages", params={"channel_id": channel_id}).status_code == 404


def test_admin_notifications_and_moderation_actions(client: TestClient, session_factory):
    board = setup_board(client, session_factory)
    tokens = board["tokens"]
    users = board["users"]

    response = client.post(
        "/api/notifications",
        json={"title": "Maintenance", "message": "Back soon", "all_users": True},
        headers=auth_headers(tokens["admin"]),
    )
    assert response.status_code == 201
    assert response.json()["count"] == 2

    response = client.post(
        "/api/notifications",
        json={"title": "Empty", "message": "Nobody"},
        headers=auth_headers(tokens["admin"]),
    )
    assert response.status_code == 400

    response = client.post(
        "/api/notifications",
        json={"title": "Nope", "message": "Not allowed", "user_id": users["bob"]["id"]},
        headers=auth_headers(tokens["alice"]),
    )
    assert response.status_code == 403

    response = client.post(
        "/api/moderation/actions",
        json={
            "action_type": "warn",
            "content_type": "event",
            "content_id": 77,
            "content_title": "Pub quiz",
            "content_author_id": users["alice"]["id"],
            "custom_reason": "Missing date",
        },
        headers=auth_headers(tokens["admin"]),
    )
    assert response.status_code == 201, response.text
    assert response.json()["is_notification_sent"] is True

    alice_inbox = client.get("/api/notifications", headers=auth_headers(tokens["alice"])).json()
    assert alice_inbox[0]["title"] == "Warning about your event listing"

    notification_id = alice_inbox[0]["id"]
    response = client.post(
        f"/api/notifications/{notification_id}/read", headers=auth_headers(tokens["bob"])
    )
    assert response.status_code == 404
    response = client.post(
        f"/api/notifications/{notification_id}/read", headers=auth_headers(tokens["alice"])
    )
    assert response.status_code == 200
    assert response.json()["is_read"] is True
