from tests.conftest import bearer, make_user, token_for

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_register_login_and_me(api):
    response = api.post("/auth/register", json={
        "username": "Kowse",
        "email": "kowse@example.com",
        "password": "secret123",
        "confirm_password": "secret123",
    })
    assert response.status_code == 201
    token = response.json()["access_token"]

    me = api.get("/auth/me", headers=bearer(token)).json()
    assert me["username"] == "Kowse"
    assert me["is_owner"] is True
    assert me["is_admin"] is False

    login = api.post("/auth/login", json={"email_or_username": "kowse", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["user"]["email"] == "kowse@example.com"


def test_register_password_mismatch(api):
    response = api.post("/auth/register", json={
        "username": "alice",
        "email": "alice@example.com",
        "password": "secret123",
        "confirm_password": "secret124",
    })
    assert response.status_code == 422
    assert "Passwords do not match" in response.text


def test_login_unknown_username(api):
    response = api.post("/auth/login", json={"email_or_username": "ghost", "password": "secret123"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Username not found"


def test_logout_revokes_token(api):
    make_user("alice")
    token = token_for("alice")
    assert api.post("/auth/logout", headers=bearer(token)).status_code == 204
    assert api.get("/auth/me", headers=bearer(token)).status_code == 401


def test_profile_lookup_and_search(api):
    make_user("Kowse")
    make_user("alice")
    headers = bearer(token_for("alice"))

    assert api.get("/users/KOWSE/profile", headers=headers).json()["username"] == "Kowse"
    missing = api.get("/users/nobody/profile", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "User not found"

    results = api.get("/users/search", params={"q": "kow"}, headers=headers).json()
    assert [r["username"] for r in results] == ["Kowse"]


def test_profile_requires_login(api):
    make_user("Kowse")
    assert api.get("/users/Kowse/profile").status_code == 401


def test_edit_profile_and_avatar(api):
    make_user("alice")
    headers = bearer(token_for("alice"))

    updated = api.put("/users/me/profile", json={"bio": "swing trader", "discord_tag": "alice#1"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["bio"] == "swing trader"
    assert updated.json()["discord_tag"] == "alice#1"

    avatar = api.post("/users/me/avatar", files={"file": ("me.png", PNG_BYTES, "image/png")}, headers=headers)
    assert avatar.status_code == 200
    avatar_url = avatar.json()["avatar_url"]
    assert "/storage/avatars/" in avatar_url

    path = avatar_url.split("/storage/", 1)[1]
    served = api.get(f"/storage/{path}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_post_lifecycle(api):
    author = make_user("alice")
    make_user("bob")
    alice = bearer(token_for("alice"))
    bob = bearer(token_for("bob"))

    created = api.post("/posts", data={"content": "BTC looks heavy"}, files={"image": ("chart.png", PNG_BYTES, "image/png")}, headers=alice)
    assert created.status_code == 201
    post = created.json()
    assert post["likes_count"] == 0
    assert post["image_url"].endswith(".png")

    liked = api.post(f"/posts/{post['id']}/like", headers=bob).json()
    assert liked == {"liked": True, "likes_count": 1}
    assert api.post(f"/posts/{post['id']}/like", headers=bob).status_code == 409

    feed = api.get("/posts", params={"user_id": author["id"]}, headers=bob).json()
    assert feed[0]["user_liked"] is True
    assert api.delete(f"/posts/{post['id']}/like", headers=bob).json() == {"liked": False, "likes_count": 0}

    assert api.put(f"/posts/{post['id']}", json={"content": "edited"}, headers=bob).status_code == 403
    assert api.put(f"/posts/{post['id']}", json={"content": "edited"}, headers=alice).json()["content"] == "edited"

    media_path = post["image_url"].split("/storage/", 1)[1]
    assert api.delete(f"/posts/{post['id']}", headers=bob).status_code == 403
    assert api.delete(f"/posts/{post['id']}", headers=alice).status_code == 204
    assert api.get(f"/posts/{post['id']}", headers=alice).status_code == 404
    assert api.get(f"/storage/{media_path}").status_code == 404


def test_empty_post_rejected(api):
    make_user("alice")
    response = api.post("/posts", data={"content": "   "}, headers=bearer(token_for("alice")))
    assert response.status_code == 400


def test_oversized_upload_creates_no_post(api):
    author = make_user("alice")
    headers = bearer(token_for("alice"))
    big = b"\x00" * (10 * 1024 * 1024 + 1)

    response = api.post("/posts", data={"content": "big"}, files={"image": ("big.png", big, "image/png")}, headers=headers)

    assert response.status_code == 400
    assert api.get("/posts", params={"user_id": author["id"]}, headers=headers).json() == []


def test_comments_and_replies(api):
    make_user("alice")
    alice = bearer(token_for("alice"))
    post = api.post("/posts", data={"content": "hello"}, headers=alice).json()

    top = api.post(f"/posts/{post['id']}/comments", json={"content": "first"}, headers=alice).json()
    assert top["author"]["username"] == "alice"
    reply = api.post(
        f"/posts/{post['id']}/comments",
        json={"content": "reply", "parent_comment_id": top["id"]},
        headers=alice,
    ).json()
    nested = api.post(
        f"/posts/{post['id']}/comments",
        json={"content": "nested", "parent_comment_id": reply["id"]},
        headers=alice,
    )
    assert nested.status_code == 400

    assert [c["id"] for c in api.get(f"/posts/{post['id']}/comments", headers=alice).json()] == [top["id"]]
    replies = api.get(f"/comments/{top['id']}/replies", headers=alice).json()
    assert [r["parent_comment_id"] for r in replies] == [top["id"]]

    assert api.post(f"/comments/{reply['id']}/like", headers=alice).json()["likes_count"] == 1
    assert api.get(f"/posts/{post['id']}", headers=alice).json()["comments_count"] == 2

    assert api.delete(f"/comments/{top['id']}", headers=alice).json() == {"removed": 2}
    assert api.get(f"/posts/{post['id']}", headers=alice).json()["comments_count"] == 0


def test_client_routes_serve_app_shell(api):
    for path in ("/", "/members", "/education", "/search", "/profile", "/settings", "/edit-profile", "/login", "/register"):
        response = api.get(path)
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]


def test_static_content(api):
    members = api.get("/content/members").json()
    assert len(members["founders"]) == 7
    assert any(m["name"] == "Kowse" for m in members["founders"])
    resources = api.get("/content/education").json()["resources"]
    assert resources[0]["title"] == "Market Fundamentals"
    assert resources[0]["detailed_content"]["sections"]


def test_storage_rejects_unknown_bucket_and_traversal(api):
    assert api.get("/storage/secrets/file.png").status_code == 404
    assert api.get("/storage/avatars/..%2F..%2Ftest.sqlite3").status_code == 404


def test_blank_search_returns_nothing(api):
    make_user("alice")
    make_user("bob")
    response = api.get("/users/search", params={"q": "   "}, headers=bearer(token_for("alice")))
    assert response.status_code == 200
    assert response.json() == []
