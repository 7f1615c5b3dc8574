from __future__ import annotations

import uuid
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import func, select

from app.auth.jwt import create_access_token, user_id_from_token
from app.core.config import settings
from app.db import get_db
from app.main import app
from app.models import Follow, User
from app.services import users_service
from app.storage import LocalStorageAdapter, get_storage


def register(client: TestClient, email: str, password: str = "StrongPass123", name: str = "Test User"):
    return client.post(
        "/api/users/register",
        json={"email": email, "password": password, "name": name},
    )


def login(client: TestClient, email: str, password: str = "StrongPass123"):
    return client.post(
        "/api/users/login",
        json={"email": email, "password": password},
    )


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def make_user(client: TestClient, email: str, name: str = "Test User") -> tuple[dict, str]:
    user = register(client, email, name=name).json()
    token = login(client, email).json()["token"]
    return user, token


def test_register_returns_user_with_avatar(client: TestClient):
    resp = register(client, "reg1@example.com", name="Reggie")
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "reg1@example.com"
    assert body["name"] == "Reggie"
    assert "password" not in body
    assert "passwordHash" not in body
    assert body["avatarUrl"] == f"/uploads/avatars/{body['id']}.png"
    assert (Path(settings.storage_root) / "avatars" / f"{body['id']}.png").is_file()


def test_avatar_is_served_as_png(client: TestClient):
    body = register(client, "static@example.com").json()
    resp = client.get(body["avatarUrl"])
    assert resp.status_code == 200
    assert resp.content.startswith(b"\x89PNG")


def test_register_missing_fields(client: TestClient):
    resp = client.post("/api/users/register", json={"email": "x@example.com", "password": "pw"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "EMPTY_FIELDS"

    resp = client.post(
        "/api/users/register",
        json={"email": "x@example.com", "password": "", "name": "X"},
    )
    assert resp.status_code == 400


def test_register_duplicate_email_conflicts(client: TestClient, db_session):
    first = register(client, "dup@example.com", name="First")
    assert first.status_code == 200

    second = register(client, "dup@example.com", password="Other", name="Second")
    assert second.status_code == 400
    assert second.json()["detail"]["code"] == "USER_EXISTS"

    users = db_session.scalars(select(User).where(User.email == "dup@example.com")).all()
    assert len(users) == 1
    assert users[0].name == "First"


def test_register_email_is_case_insensitive(client: TestClient):
    assert register(client, "Case@Example.com").status_code == 200
    resp = register(client, "case@example.COM")
    assert resp.status_code == 400

    assert login(client, "CASE@example.com").status_code == 200


def test_register_failed_avatar_write_leaves_no_user(db_session, tmp_path):
    class BrokenStorage(LocalStorageAdapter):
        def put_file(self, key, fileobj):
            raise OSError("disk full")

    app.dependency_overrides[get_storage] = lambda: BrokenStorage(tmp_path)
    client = TestClient(app, raise_server_exceptions=False)

    resp = register(client, "broken@example.com")
    assert resp.status_code == 500
    assert resp.json() == {"detail": {"code": "INTERNAL_ERROR", "message": "internal server error"}}
    assert "disk full" not in resp.text

    count = db_session.scalar(select(func.count()).select_from(User))
    assert count == 0


def test_register_commit_failure_removes_avatar(db_session, tmp_path):
    app.dependency_overrides[get_storage] = lambda: LocalStorageAdapter(tmp_path)
    session_factory = app.dependency_overrides[get_db]

    def commit_fails():
        raise RuntimeError("connection lost")

    def failing_db():
        for db in session_factory():
            db.commit = commit_fails
            yield db

    app.dependency_overrides[get_db] = failing_db
    client = TestClient(app, raise_server_exceptions=False)

    resp = register(client, "flaky@example.com")
    assert resp.status_code == 500
    assert resp.json()["detail"]["code"] == "INTERNAL_ERROR"

    assert list((tmp_path / "avatars").glob("*.png")) == []
    assert db_session.scalar(select(func.count()).select_from(User)) == 0


def test_register_duplicate_caught_by_unique_constraint(client: TestClient, db_session, monkeypatch):
    assert register(client, "race@example.com", name="First").status_code == 200

    monkeypatch.setattr(users_service, "_find_by_email", lambda db, email: None)
    resp = register(client, "race@example.com", name="Second")
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "USER_EXISTS"

    users = db_session.scalars(select(User).where(User.email == "race@example.com")).all()
    assert [u.name for u in users] == ["First"]


def test_register_rejects_malformed_email(client: TestClient):
    resp = register(client, "not-an-email")
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "INVALID_EMAIL"


def test_login_failures_are_indistinguishable(client: TestClient):
    register(client, "known@example.com")

    wrong_password = login(client, "known@example.com", password="nope")
    unknown_email = login(client, "unknown@example.com", password="nope")

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_login_missing_fields(client: TestClient):
    resp = client.post("/api/users/login", json={"email": "a@example.com"})
    assert resp.status_code == 400


def test_login_token_identifies_user(client: TestClient):
    user = register(client, "ident@example.com").json()
    resp = login(client, "ident@example.com")
    assert resp.status_code == 200
    body = resp.json()
    assert body["tokenType"] == "bearer"
    assert body["expiresIn"] == 900
    assert user_id_from_token(body["token"]) == uuid.UUID(user["id"])


def test_authenticated_routes_reject_bad_tokens(client: TestClient):
    user, _ = make_user(client, "guard@example.com")

    assert client.get("/api/users/current").status_code == 401

    resp = client.get("/api/users/current", headers=auth_headers("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"

    expired = create_access_token(uuid.UUID(user["id"]), ttl_seconds=-60)
    assert client.get("/api/users/current", headers=auth_headers(expired)).status_code == 401


def test_current_includes_follow_expansions(client: TestClient, db_session):
    alice, alice_token = make_user(client, "alice@example.com", name="Alice")
    bob, _ = make_user(client, "bob@example.com", name="Bob")

    db_session.add(Follow(follower_id=uuid.UUID(bob["id"]), following_id=uuid.UUID(alice["id"])))
    db_session.commit()

    resp = client.get("/api/users/current", headers=auth_headers(alice_token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == alice["id"]
    assert body["following"] == []
    assert len(body["followers"]) == 1
    assert body["followers"][0]["follower"]["name"] == "Bob"


def test_current_for_deleted_user_is_not_found(client: TestClient):
    token = create_access_token(uuid.uuid4())
    resp = client.get("/api/users/current", headers=auth_headers(token))
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "USER_NOT_FOUND"


def test_get_user_by_id_reports_is_following(client: TestClient):
    alice, alice_token = make_user(client, "alice2@example.com", name="Alice")
    bob, _ = make_user(client, "bob2@example.com", name="Bob")

    resp = client.get(f"/api/users/{bob['id']}", headers=auth_headers(alice_token))
    assert resp.status_code == 200
    assert resp.json()["isFollowing"] is False

    client.post("/api/follows", json={"followingId": bob["id"]}, headers=auth_headers(alice_token))

    resp = client.get(f"/api/users/{bob['id']}", headers=auth_headers(alice_token))
    body = resp.json()
    assert body["isFollowing"] is True
    assert body["followers"][0]["followerId"] == alice["id"]


def test_get_user_by_id_not_found(client: TestClient):
    _, token = make_user(client, "lookup@example.com")

    assert client.get(f"/api/users/{uuid.uuid4()}", headers=auth_headers(token)).status_code == 404
    assert client.get("/api/users/not-a-uuid", headers=auth_headers(token)).status_code == 404


def test_update_other_user_is_forbidden(client: TestClient, db_session):
    alice, _ = make_user(client, "alice3@example.com", name="Alice")
    _, bob_token = make_user(client, "bob3@example.com", name="Bob")

    resp = client.put(
        f"/api/users/{alice['id']}",
        data={"name": "Hacked", "email": "bob3@example.com", "dateOfBirth": "garbage"},
        headers=auth_headers(bob_token),
    )
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "FORBIDDEN"

    row = db_session.get(User, uuid.UUID(alice["id"]))
    assert row.name == "Alice"
    assert row.email == "alice3@example.com"


def test_update_is_partial(client: TestClient):
    user, token = make_user(client, "partial@example.com", name="Pat")

    first = client.put(
        f"/api/users/{user['id']}",
        data={"location": "Lisbon", "dateOfBirth": "1990-05-17"},
        headers=auth_headers(token),
    )
    assert first.status_code == 200

    resp = client.put(f"/api/users/{user['id']}", data={"bio": "x"}, headers=auth_headers(token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["bio"] == "x"
    assert body["name"] == "Pat"
    assert body["email"] == "partial@example.com"
    assert body["location"] == "Lisbon"
    assert body["dateOfBirth"] == "1990-05-17"
    assert body["avatarUrl"] == user["avatarUrl"]


def test_update_duplicate_email(client: TestClient):
    make_user(client, "taken@example.com")
    user, token = make_user(client, "mover@example.com")

    resp = client.put(
        f"/api/users/{user['id']}",
        data={"email": "TAKEN@example.com"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "EMAIL_IN_USE"

    same = client.put(
        f"/api/users/{user['id']}",
        data={"email": "mover@example.com"},
        headers=auth_headers(token),
    )
    assert same.status_code == 200


def test_update_duplicate_caught_by_unique_constraint(client: TestClient, db_session, monkeypatch):
    make_user(client, "held@example.com")
    user, token = make_user(client, "switcher@example.com")

    monkeypatch.setattr(users_service, "_find_by_email", lambda db, email: None)
    resp = client.put(
        f"/api/users/{user['id']}",
        data={"email": "held@example.com"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "EMAIL_IN_USE"

    count = db_session.scalar(select(func.count()).select_from(User).where(User.email == "held@example.com"))
    assert count == 1
    assert db_session.get(User, uuid.UUID(user["id"])).email == "switcher@example.com"


def test_update_rejects_malformed_email(client: TestClient, db_session):
    user, token = make_user(client, "valid@example.com")
    resp = client.put(
        f"/api/users/{user['id']}",
        data={"email": "not-an-email"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "INVALID_EMAIL"
    assert db_session.get(User, uuid.UUID(user["id"])).email == "valid@example.com"


def test_update_rejects_bad_date(client: TestClient):
    user, token = make_user(client, "dates@example.com")
    resp = client.put(
        f"/api/users/{user['id']}",
        data={"dateOfBirth": "17/05/1990"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "INVALID_DATE"


def test_update_never_reassigns_avatar(client: TestClient):
    user, token = make_user(client, "avatar@example.com")
    resp = client.put(
        f"/api/users/{user['id']}",
        data={"name": "New Name"},
        files={"avatar": ("me.png", b"\x89PNG fake", "image/png")},
        headers=auth_headers(token),
    )
    assert resp.status_code == 200
    assert resp.json()["avatarUrl"] == user["avatarUrl"]
    assert resp.json()["name"] == "New Name"


def test_end_to_end_profile_flow(client: TestClient):
    reg = register(client, "a@x.com", password="pw", name="Al")
    assert reg.status_code == 200
    al = reg.json()
    assert al["avatarUrl"]

    log = login(client, "a@x.com", password="pw")
    assert log.status_code == 200
    token = log.json()["token"]

    profile = client.get(f"/api/users/{al['id']}", headers=auth_headers(token))
    assert profile.status_code == 200
    assert profile.json()["isFollowing"] is False

    updated = client.put(
        f"/api/users/{al['id']}",
        data={"location": "NYC"},
        headers=auth_headers(token),
    )
    assert updated.status_code == 200
    assert updated.json()["location"] == "NYC"
    assert updated.json()["email"] == "a@x.com"


def test_responses_carry_request_id(client: TestClient):
    resp = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.status_code == 200
    assert resp.headers["X-Request-ID"] == "req-123"
