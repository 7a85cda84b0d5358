import pytest

import auth
from exceptions import AuthError, ConflictError, InvalidInputError, NotFoundError
from tests.conftest import DEFAULT_PASSWORD, make_user


def test_sign_in_by_email_or_username():
    user = make_user("Kowse", "kowse@example.com")
    by_email = auth.sign_in("kowse@example.com", DEFAULT_PASSWORD)
    by_username = auth.sign_in("kowse", DEFAULT_PASSWORD)
    assert by_email["user"] == by_username["user"] == {"id": user["id"], "email": "kowse@example.com"}
    assert by_email["token_type"] == "bearer"


def test_unknown_username():
    with pytest.raises(NotFoundError, match="Username not found"):
        auth.sign_in("ghost", DEFAULT_PASSWORD)


def test_wrong_password():
    make_user("alice")
    with pytest.raises(AuthError, match="Invalid login credentials"):
        auth.sign_in("alice", "wrong-password")


def test_sign_up_rejects_duplicates_and_short_passwords():
    make_user("alice", "alice@example.com")
    with pytest.raises(ConflictError, match="Username already taken"):
        auth.sign_up("ALICE", "other@example.com", DEFAULT_PASSWORD)
    with pytest.raises(ConflictError, match="User already registered"):
        auth.sign_up("alice2", "alice@example.com", DEFAULT_PASSWORD)
    with pytest.raises(InvalidInputError, match="at least 6 characters"):
        auth.sign_up("bob", "bob@example.com", "12345")


def test_sign_up_creates_default_profile():
    user = make_user("alice")
    from repositories import SqliteProfileRepository
    profile = SqliteProfileRepository().get_by_id(user["id"])
    assert profile["username"] == "alice"
    assert profile["role"] == "user"
    assert profile["is_admin"] is False


def test_sign_out_revokes_only_that_session():
    make_user("alice")
    first = auth.sign_in("alice", DEFAULT_PASSWORD)["access_token"]
    second = auth.sign_in("alice", DEFAULT_PASSWORD)["access_token"]

    auth.sign_out(first)
    assert auth.verify_token(first) is None
    assert auth.get_user(second)["email"] == "alice@example.com"


def test_sign_out_all_revokes_everything():
    make_user("alice")
    make_user("bob")
    tokens = [auth.sign_in(name, DEFAULT_PASSWORD)["access_token"] for name in ("alice", "bob")]

    assert auth.sign_out_all() == 2
    for token in tokens:
        with pytest.raises(AuthError):
            auth.get_user(token)


def test_update_user_password():
    user = make_user("alice")
    auth.update_user_by_id(user["id"], password="newsecret")
    assert auth.check_password(user["id"], "newsecret")
    assert not auth.check_password(user["id"], DEFAULT_PASSWORD)
