# -*- coding: utf-8 -*-
"""Self-service password change."""
from constants.roles import Role

PASSWORD_PATH = "/api/auth/users/password"


def _change(client, headers, current, new):
    return client.put(PASSWORD_PATH, headers=headers, json={"currentPassword": current, "newPassword": new})


def test_change_password_success(client, make_user, auth_headers, login):
    user = make_user(Role.DEVELOPER)
    headers = auth_headers(user)
    resp = _change(client, headers, "Secret123", "Another456")
    assert resp.status_code == 200, resp.get_json()
    assert resp.get_json()["data"]["token"]

    old = client.post("/api/auth/login", json={"email": user.email, "password": "Secret123"})
    assert old.status_code == 401
    assert login(user, "Another456")


def test_change_password_requires_both_fields(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    resp = client.put(PASSWORD_PATH, headers=headers, json={"currentPassword": "Secret123"})
    assert resp.status_code == 400


def test_snake_case_fields_accepted(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    resp = client.put(
        PASSWORD_PATH, headers=headers,
        json={"current_password": "Secret123", "new_password": "Another456"},
    )
    assert resp.status_code == 200


def test_wrong_current_password(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    resp = _change(client, headers, "nope", "Another456")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Current password is incorrect"


def test_new_password_policy(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    assert _change(client, headers, "Secret123", "abc").status_code == 400
    same = _change(client, headers, "Secret123", "Secret123")
    assert same.status_code == 400
    assert "differ" in same.get_json()["message"]


def test_repeated_failures_block_further_attempts(app, client, make_user, auth_headers):
    app.config["PASSWORD_CHANGE_FAIL_LIMIT"] = 3
    headers = auth_headers(make_user())
    for _ in range(3):
        assert _change(client, headers, "nope", "Another456").status_code == 400
    blocked = _change(client, headers, "Secret123", "Another456")
    assert blocked.status_code == 429
    assert blocked.get_json()["status"] == "fail"


def test_block_expires(app, client, clock, make_user, auth_headers):
    app.config["PASSWORD_CHANGE_FAIL_LIMIT"] = 1
    app.config["PASSWORD_CHANGE_BLOCK_SECONDS"] = 60
    headers = auth_headers(make_user())
    assert _change(client, headers, "nope", "Another456").status_code == 400
    assert _change(client, headers, "Secret123", "Another456").status_code == 429
    clock.advance(61)
    assert _change(client, headers, "Secret123", "Another456").status_code == 200
