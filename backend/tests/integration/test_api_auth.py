"""Integration tests for authentication endpoints."""

from __future__ import annotations

from tests.helpers.assertions import assert_json_keys, assert_problem
from tests.helpers.auth import committed_user, token_from_email

PASSWORD = "Secret!23"


def _login(client, email, password=PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def test_register_verify_and_login(client, outbox):
    payload = {"name": "Trinity", "email": "Trinity@Example.com", "password": PASSWORD}

    resp = client.post("/api/v1/auth/register", json=payload)
    assert resp.status_code == 201
    assert resp.get_json()["data"] is None

    assert_problem(_login(client, "trinity@example.com"), 404, "user_not_found")

    [message] = outbox
    assert message.to == "trinity@example.com"
    token = token_from_email(message.html)
    resp = client.get("/api/v1/auth/verify-email", query_string={"token": token})
    assert resp.status_code == 200

    resp = _login(client, "trinity@example.com")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert_json_keys(data, {"access_token", "refresh_token", "access_expires_at", "refresh_expires_at", "user"})
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "trinity@example.com"
    assert "password_hash" not in data["user"]


def test_register_validation_and_conflict(client, session):
    committed_user(session, email="taken@example.com")

    resp = client.post("/api/v1/auth/register", json={"name": "X", "email": "taken@example.com", "password": PASSWORD})
    assert_problem(resp, 409, "email_already_exists")

    resp = client.post("/api/v1/auth/register", json={"name": "X", "email": "new@example.com", "password": "plain"})
    body = assert_problem(resp, 422, "validation_error")
    assert "password" in body["details"]["errors"]


def test_login_wrong_password(client, session):
    user = committed_user(session)
    assert_problem(_login(client, user.email, "Wrong!pass"), 401, "password_mismatch")


def test_refresh_rotation_via_header_and_body(client, session):
    user = committed_user(session, password=PASSWORD)
    first = _login(client, user.email).get_json()["data"]

    resp = client.post("/api/v1/auth/refresh-token", headers={"X-Refresh-Token": first["refresh_token"]})
    assert resp.status_code == 200
    second = resp.get_json()["data"]
    assert second["refresh_token"] != first["refresh_token"]

    reuse = client.post("/api/v1/auth/refresh-token", json={"refresh_token": first["refresh_token"]})
    assert_problem(reuse, 401, "token_invalid")

    resp = client.post("/api/v1/auth/refresh-token", json={"refresh_token": second["refresh_token"]})
    assert resp.status_code == 200


def test_refresh_requires_token_and_rejects_access_token(client, session):
    user = committed_user(session, password=PASSWORD)
    tokens = _login(client, user.email).get_json()["data"]

    assert_problem(client.post("/api/v1/auth/refresh-token", json={}), 400, "refresh_token_required")
    resp = client.post("/api/v1/auth/refresh-token", headers={"X-Refresh-Token": tokens["access_token"]})
    assert_problem(resp, 401, "token_invalid")


def test_verify_email_via_post_and_bad_token(client, session, container):
    user = committed_user(session, password=PASSWORD, is_active=False)
    token = container.auth.action_tokens.issue_verify(user.id)

    assert_problem(client.post("/api/v1/auth/verify-email", json={"token": "nope"}), 401, "token_invalid")
    assert_problem(client.get("/api/v1/auth/verify-email"), 422, "validation_error")
    assert client.post("/api/v1/auth/verify-email", json={"token": token}).status_code == 200
    assert _login(client, user.email).status_code == 200


def test_resend_verification(client, session, outbox):
    user = committed_user(session, is_active=False)

    resp = client.post("/api/v1/auth/send-verify-email", json={"email": user.email})
    assert resp.status_code == 200
    assert [m.to for m in outbox] == [user.email]

    resp = client.post("/api/v1/auth/send-verify-email", json={"email": "ghost@example.com"})
    assert_problem(resp, 404, "user_not_found")


def test_password_reset_flow(client, session, outbox):
    user = committed_user(session, password=PASSWORD)

    resp = client.post("/api/v1/auth/send-reset-password", json={"email": user.email})
    assert resp.status_code == 200
    token = token_from_email(outbox[0].html)

    resp = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "N3w-Secret!"})
    assert resp.status_code == 200
    assert _login(client, user.email, "N3w-Secret!").status_code == 200
    assert_problem(_login(client, user.email), 401, "password_mismatch")

    resp = client.post("/api/v1/auth/reset-password", json={"token": "bogus", "new_password": "N3w-Secret!"})
    assert_problem(resp, 401, "token_invalid")
