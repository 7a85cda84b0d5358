import config
from tests.conftest import DEFAULT_PASSWORD, bearer, make_user, token_for


def change_password(api, token, user_id, new_password):
    headers = bearer(token) if token else {}
    return api.post(
        "/api/admin/change-password",
        json={"userId": user_id, "newPassword": new_password},
        headers=headers,
    )


def test_owner_changes_another_users_password(api):
    make_user("kowse", is_admin=True)
    target = make_user("bob")

    response = change_password(api, token_for("kowse"), target["id"], "brandnew")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert api.post("/auth/login", json={"email_or_username": "bob", "password": "brandnew"}).status_code == 200


def test_non_owner_admin_is_refused(api):
    make_user("bones", is_admin=True)
    target = make_user("bob")

    response = change_password(api, token_for("bones"), target["id"], "brandnew")

    assert response.status_code == 403
    assert response.json()["detail"] == "Only the owner can change other users' passwords"


def test_plain_user_is_refused(api):
    make_user("alice")
    target = make_user("bob")

    response = change_password(api, token_for("alice"), target["id"], "brandnew")

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


def test_short_password_rejected_before_auth(api):
    response = change_password(api, None, 1, "12345")

    assert response.status_code == 400
    assert "must be at least 6 characters" in response.json()["detail"]


def test_missing_fields_and_header(api):
    assert change_password(api, None, None, "abcdef").json()["detail"] == "Missing userId or newPassword"

    response = change_password(api, None, 5, "abcdef")
    assert response.status_code == 401
    assert response.json()["detail"] == "No authorization header"


def test_unknown_target(api):
    make_user("kowse", is_admin=True)
    response = change_password(api, token_for("kowse"), 999, "brandnew")
    assert response.status_code == 404


def test_update_own_password(api):
    make_user("alice")
    token = token_for("alice")

    wrong = api.post(
        "/api/user/update-password",
        json={"currentPassword": "not-it", "newPassword": "another1"},
        headers=bearer(token),
    )
    assert wrong.status_code == 403
    assert wrong.json()["detail"] == "Current password is incorrect"

    short = api.post(
        "/api/user/update-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "123"},
        headers=bearer(token),
    )
    assert short.status_code == 400
    assert short.json()["detail"] == "New password must be at least 6 characters long"

    ok = api.post(
        "/api/user/update-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "another1"},
        headers=bearer(token),
    )
    assert ok.status_code == 200
    assert token_for("alice", "another1")


def test_update_own_email(api):
    make_user("alice")
    token = token_for("alice")

    response = api.post("/api/user/update-email", json={"newEmail": "new@example.com"}, headers=bearer(token))

    assert response.status_code == 200
    me = api.get("/auth/me", headers=bearer(token)).json()
    assert me["email"] == "new@example.com"
    assert api.get("/users/me/profile", headers=bearer(token)).json()["email"] == "new@example.com"


def test_update_email_requires_value(api):
    make_user("alice")
    response = api.post("/api/user/update-email", json={}, headers=bearer(token_for("alice")))
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing newEmail"


def test_role_and_admin_flag_endpoints(api):
    make_user("kowse", is_admin=True)
    make_user("bones", is_admin=True)
    target = make_user("bob")

    role = api.put(f"/api/admin/users/{target['id']}/role", json={"role": "member"}, headers=bearer(token_for("bones")))
    assert role.status_code == 200
    assert role.json()["role"] == "member"

    refused = api.put(f"/api/admin/users/{target['id']}/admin", json={"is_admin": True}, headers=bearer(token_for("bones")))
    assert refused.status_code == 403
    assert refused.json()["detail"] == "Only the owner can modify admin permissions"

    granted = api.put(f"/api/admin/users/{target['id']}/admin", json={"is_admin": True}, headers=bearer(token_for("kowse")))
    assert granted.status_code == 200
    assert granted.json()["is_admin"] is True


def test_admin_user_list(api):
    make_user("kowse", is_admin=True)
    make_user("alice")

    assert api.get("/api/admin/users", headers=bearer(token_for("alice"))).status_code == 403
    users = api.get("/api/admin/users", headers=bearer(token_for("kowse"))).json()
    assert [u["username"] for u in users] == ["alice", "kowse"]


def test_logout_all_requires_service_key(api, monkeypatch):
    monkeypatch.setattr(config, "SERVICE_ROLE_KEY", "service-secret")
    make_user("alice")
    token = token_for("alice")

    assert api.post("/api/admin/logout-all", headers={"X-Service-Role-Key": "nope"}).status_code == 403

    response = api.post("/api/admin/logout-all", headers={"X-Service-Role-Key": "service-secret"})
    assert response.status_code == 200
    assert response.json()["sessions_revoked"] == 1
    assert api.get("/auth/me", headers=bearer(token)).status_code == 401
