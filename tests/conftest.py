import pytest
from fastapi.testclient import TestClient

import auth
import database
import file_utils
from repositories import SqliteProfileRepository

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def temp_storage(tmp_path, monkeypatch):
    monkeypatch.setattr(database, "DB_NAME", str(tmp_path / "test.sqlite3"))
    monkeypatch.setattr(file_utils, "UPLOAD_FOLDER", str(tmp_path / "uploads"))
    database.init_db()
    return tmp_path


@pytest.fixture
def api():
    from main import app
    with TestClient(app) as client:
        yield client


def make_user(username: str, email: str = None, password: str = DEFAULT_PASSWORD,
              is_admin: bool = False, role: str = None) -> dict:
    user = auth.sign_up(username, email or f"{username.lower()}@example.com", password)
    fields = {}
    if is_admin:
        fields["is_admin"] = True
    if role:
        fields["role"] = role
    if fields:
        SqliteProfileRepository().update(user["id"], fields)
    return user


def token_for(identifier: str, password: str = DEFAULT_PASSWORD) -> str:
    return auth.sign_in(identifier, password)["access_token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
