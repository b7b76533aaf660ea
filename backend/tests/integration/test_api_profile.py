"""Integration tests for the authenticated profile endpoints."""

from __future__ import annotations

import io

from tests.helpers.assertions import assert_problem
from tests.helpers.auth import bearer, committed_user

PASSWORD = "Secret!23"


def test_profile_requires_bearer_token(client, session):
    assert_problem(client.get("/api/v1/profile"), 401, "unauthorized")
    assert_problem(client.get("/api/v1/profile", headers={"Authorization": "Basic abc"}), 401, "unauthorized")
    assert_problem(client.get("/api/v1/profile", headers={"Authorization": "Bearer junk"}), 401, "token_invalid")


def test_refresh_token_is_not_an_access_token(client, session, container):
    user = committed_user(session)
    refresh = container.signer.issue_refresh_token(user_id=user.id).token
    resp = client.get("/api/v1/profile", headers={"Authorization": f"Bearer {refresh}"})
    assert_problem(resp, 401, "token_invalid")


def test_get_and_update_profile_json(client, session, container):
    user = committed_user(session, name="Before")
    headers = bearer(container, user)

    resp = client.get("/api/v1/profile", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["email"] == user.email

    resp = client.put("/api/v1/profile", json={"name": "After", "gender": "Female"}, headers=headers)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert (data["name"], data["gender"]) == ("After", "Female")

    resp = client.put("/api/v1/profile", json={"gender": "robot"}, headers=headers)
    assert_problem(resp, 422, "validation_error")


def test_avatar_upload_is_served(client, session, container):
    user = committed_user(session)
    headers = bearer(container, user)

    resp = client.put(
        "/api/v1/profile",
        data={"name": "With Avatar", "avatar": (io.BytesIO(b"\x89PNG-data"), "face.png")},
        content_type="multipart/form-data",
        headers=headers,
    )
    assert resp.status_code == 200, resp.get_data(as_text=True)
    url = resp.get_json()["data"]["avatar"]
    assert url.startswith(f"/assets/avatars/user_{user.id}/")

    served = client.get(url)
    assert served.status_code == 200
    assert served.data == b"\x89PNG-data"


def test_avatar_type_and_size_rejected(client, session, container):
    headers = bearer(container, committed_user(session))

    resp = client.put(
        "/api/v1/profile",
        data={"avatar": (io.BytesIO(b"MZ"), "tool.exe")},
        content_type="multipart/form-data",
        headers=headers,
    )
    assert_problem(resp, 415, "unsupported_file_type")

    resp = client.put(
        "/api/v1/profile",
        data={"avatar": (io.BytesIO(b"x" * 2048), "big.png")},
        content_type="multipart/form-data",
        headers=headers,
    )
    assert_problem(resp, 413, "payload_too_large")


def test_change_password_and_logout(client, session, container):
    user = committed_user(session, password=PASSWORD)
    headers = bearer(container, user)
    login = client.post("/api/v1/auth/login", json={"email": user.email, "password": PASSWORD})
    refresh = login.get_json()["data"]["refresh_token"]

    resp = client.post(
        "/api/v1/profile/change-password",
        json={"old_password": "Wrong!pass", "new_password": "N3w-Secret!"},
        headers=headers,
    )
    assert_problem(resp, 401, "password_mismatch")

    resp = client.post(
        "/api/v1/profile/change-password",
        json={"old_password": PASSWORD, "new_password": "N3w-Secret!"},
        headers=headers,
    )
    assert resp.status_code == 200

    assert client.post("/api/v1/profile/logout", headers=headers).status_code == 200
    resp = client.post("/api/v1/auth/refresh-token", headers={"X-Refresh-Token": refresh})
    assert_problem(resp, 401, "token_invalid")
