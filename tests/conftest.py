import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from finmate.app import create_app
from finmate.auth.session import SessionContext
from finmate.auth.tokens import TokenIssuer
from finmate.auth.users import register_user
from finmate.config import Settings
from finmate.infra.spending_repo import SpendingRepository
from finmate.infra.user_repo import UserRepository

TEST_SECRET = "test-secret-not-for-production"


class RecordingMailer:
    def __init__(self) -> None:
        self.sent: List[Tuple[str, str, str]] = []

    def send_simple_message(self, to: str, subject: str, body: str) -> None:
        self.sent.append((to, subject, body))


@pytest.fixture()
def settings() -> Settings:
    return Settings(secret_key=TEST_SECRET, token_ttl_seconds=3600)


@pytest.fixture()
def tokens(settings) -> TokenIssuer:
    return TokenIssuer(settings.secret_key, ttl_seconds=settings.token_ttl_seconds, salt=settings.token_salt)


@pytest.fixture()
def users() -> UserRepository:
    return UserRepository()


@pytest.fixture()
def spendings() -> SpendingRepository:
    return SpendingRepository()


@pytest.fixture()
def alice(users):
    return register_user(users, username="alice", email="a@x.com", password="pw")


@pytest.fixture()
def bob(users):
    return register_user(users, username="bob", email="b@x.com", password="pw2")


@pytest.fixture()
def alice_session(alice) -> SessionContext:
    return SessionContext(identity=alice)


@pytest.fixture()
def bob_session(bob) -> SessionContext:
    return SessionContext(identity=bob)


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def client(settings, mailer) -> TestClient:
    app = create_app(settings, mailer=mailer)
    return TestClient(app)


def signup_and_signin(client: TestClient, username: str, email: str, password: str = "pw") -> str:
    r = client.post("/api/auth/signup", json={"username": username, "email": email, "password": password})
    assert r.status_code == 200, r.text
    r = client.post("/api/auth/signin", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
