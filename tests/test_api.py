"""Tests for the HTTP API."""
from datetime import datetime

import pytest

from conduit.models import Article
from web.auth import article_store, user_store


@pytest.mark.asyncio
async def test_health(client):
    """Health endpoint returns ok."""
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_signup_and_login(client):
    r = await client.post(
        "/api/users",
        json={"user": {"username": "alice", "email": "alice@x.com", "password": "pw1"}},
    )
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["username"] == "alice"
    assert user["token"]
    assert "password" not in user

    r = await client.post("/api/users/login", json={"user": {"email": "alice@x.com", "password": "pw1"}})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "alice@x.com"


@pytest.mark.asyncio
async def test_duplicate_signup_returns_400_with_username_error(client, auth_headers):
    r = await client.post(
        "/api/users",
        json={"user": {"username": "bob", "email": "alice@x.com", "password": "pw2"}},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Input data validation failed"
    assert "username" in body["errors"]

    r = await client.get("/api/users")
    assert [u["username"] for u in r.json()] == ["alice"]


@pytest.mark.asyncio
async def test_login_failure_does_not_reveal_which_part_was_wrong(client, auth_headers):
    wrong_password = await client.post(
        "/api/users/login", json={"user": {"email": "alice@x.com", "password": "wrong"}}
    )
    unknown_email = await client.post(
        "/api/users/login", json={"user": {"email": "ghost@x.com", "password": "pw1"}}
    )
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


@pytest.mark.asyncio
async def test_current_user_requires_token(client, auth_headers):
    r = await client.get("/api/user")
    assert r.status_code == 401

    r = await client.get("/api/user", headers={"Authorization": "Token garbage"})
    assert r.status_code == 401

    r = await client.get("/api/user", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["user"]["username"] == "alice"

    bearer = {"Authorization": auth_headers["Authorization"].replace("Token", "Bearer")}
    r = await client.get("/api/user", headers=bearer)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_update_current_user(client, auth_headers):
    r = await client.put("/api/user", json={"user": {"bio": "hello", "image": "/a.png"}}, headers=auth_headers)
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["bio"] == "hello"
    assert user["image"] == "/a.png"
    assert user["username"] == "alice"


@pytest.mark.asyncio
async def test_delete_own_account(client, auth_headers):
    r = await client.delete("/api/users/alice@x.com", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": 1}

    # Token outlives the account but no longer resolves to a user
    r = await client.delete("/api/users/alice@x.com", headers=auth_headers)
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_cannot_delete_another_users_account(client, auth_headers):
    r = await client.post(
        "/api/users",
        json={"user": {"username": "bob", "email": "bob@x.com", "password": "pw2"}},
    )
    bob_headers = {"Authorization": f"Token {r.json()['user']['token']}"}

    r = await client.delete("/api/users/alice@x.com", headers=bob_headers)
    assert r.status_code == 403

    r = await client.delete("/api/users/nobody@x.com", headers=bob_headers)
    assert r.status_code == 403

    r = await client.get("/api/users")
    assert [u["username"] for u in r.json()] == ["alice", "bob"]


@pytest.mark.asyncio
async def test_user_stats_and_roster(client, auth_headers):
    await client.post(
        "/api/users",
        json={"user": {"username": "bob", "email": "bob@x.com", "password": "pw2"}},
    )
    bob = await user_store.find_one(username="bob")
    await article_store.insert(
        Article(slug="bobs-post", title="Bob's post", author_id=bob.id, favorites_count=4, created_at=datetime(2024, 3, 1))
    )

    r = await client.get(f"/api/user/{bob.id}/stats")
    assert r.status_code == 200
    assert r.json()["favoriteCount"] == 4
    assert r.json()["articleCount"] == 1

    r = await client.get("/api/user/9999/stats")
    assert r.status_code == 404

    r = await client.get("/api/user/roster")
    assert r.status_code == 200
    roster = r.json()
    assert [e["username"] for e in roster] == ["bob", "alice"]
    assert roster[0]["profileLink"] == "/profiles/bob"
    assert roster[0]["firstArticleDate"].startswith("2024-03-01")
    assert roster[1]["firstArticleDate"] == ""
