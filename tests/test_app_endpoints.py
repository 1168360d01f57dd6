import logging

import pytest
from fastapi.testclient import TestClient

from conftest import TEST_SECRET, auth, signup_and_signin
from finmate.app import SIGNUP_OK, create_app
from finmate.config import Settings, load_settings
from finmate.services.email_service import CONFIRM_SUBJECT

LUNCH = {"amount": "12.50", "category": "FOOD", "date": "2024-01-05", "description": "lunch"}


def test_walkthrough_signup_signin_add_list_forbidden_delete(client, mailer):
    r = client.post("/api/auth/signup", json={"username": "alice", "email": "a@x.com", "password": "pw"})
    assert r.status_code == 200
    assert r.json()["message"] == SIGNUP_OK
    assert r.json()["user"] == {"id": 1, "username": "alice", "email": "a@x.com"}
    assert "password_hash" not in r.text
    assert mailer.sent == [("a@x.com", CONFIRM_SUBJECT, "Please confirm your email.")]

    r = client.post("/api/auth/signup", json={"username": "alice", "email": "other@x.com", "password": "pw"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Username is already taken"

    r = client.post("/api/auth/signin", json={"username": "alice", "password": "pw"})
    assert r.status_code == 200
    body = r.json()
    assert body["type"] == "Bearer"
    token = body["token"]

    r = client.post("/api/spendings", json=LUNCH, headers=auth(token))
    assert r.status_code == 200
    rid = r.json()["id"]

    r = client.get("/api/spendings", headers=auth(token))
    assert r.status_code == 200
    assert [s["id"] for s in r.json()] == [rid]
    assert r.json()[0]["amount"] == "12.50"

    other = signup_and_signin(client, "mallory", "m@x.com")
    r = client.delete(f"/api/spendings/{rid}", headers=auth(other))
    assert r.status_code == 403

    r = client.get("/api/spendings", headers=auth(other))
    assert r.json() == []

    r = client.delete(f"/api/spendings/{rid}", headers=auth(token))
    assert r.status_code == 200
    assert client.get("/api/spendings", headers=auth(token)).json() == []


def test_duplicate_email_message(client):
    signup_and_signin(client, "alice", "a@x.com")
    r = client.post("/api/auth/signup", json={"username": "alice2", "email": "a@x.com", "password": "pw"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Email is already in use"


def test_signup_validation(client):
    r = client.post("/api/auth/signup", json={"username": "alice", "password": "pw"})
    assert r.status_code == 400
    r = client.post("/api/auth/signup", json={"username": "  ", "email": "a@x.com", "password": "pw"})
    assert r.status_code == 400


def test_bad_credentials_are_indistinguishable(client):
    signup_and_signin(client, "alice", "a@x.com")
    wrong_pw = client.post("/api/auth/signin", json={"username": "alice", "password": "nope"})
    unknown = client.post("/api/auth/signin", json={"username": "nobody", "password": "nope"})
    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json() == {"detail": "Invalid username or password"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/spendings"),
        ("post", "/api/spendings"),
        ("delete", "/api/spendings/1"),
        ("get", "/api/spendings/1"),
        ("get", "/api/spendings/summary"),
        ("get", "/api/spendings/export.csv"),
    ],
)
def test_spending_routes_require_token(client, method, path):
    kwargs = {"json": LUNCH} if method == "post" else {}
    r = getattr(client, method)(path, **kwargs)
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"

    r = getattr(client, method)(path, headers={"Authorization": "Bearer not.a.token"}, **kwargs)
    assert r.status_code == 401
    assert r.json() == {"detail": "Unauthenticated"}


def test_anonymous_request_with_bad_body_is_401_not_400(client):
    r = client.post("/api/spendings", json=[1, 2])
    assert r.status_code == 401


def test_expired_and_forged_tokens_get_generic_401(client, tokens):
    signup_and_signin(client, "alice", "a@x.com")
    expired = tokens.issue("alice", now=0)
    forged = tokens.issue("alice")[:-3] + "xyz"
    for t in (expired, forged):
        r = client.get("/api/spendings", headers=auth(t))
        assert r.status_code == 401
        assert r.json() == {"detail": "Unauthenticated"}


@pytest.mark.parametrize(
    "patch",
    [
        {"amount": "abc"},
        {"amount": "-1"},
        {"amount": None},
        {"category": "CARS"},
        {"date": "05/01/2024"},
        {"date": "2024-02-30"},
    ],
)
def test_add_spending_validation_is_400(client, patch):
    token = signup_and_signin(client, "alice", "a@x.com")
    r = client.post("/api/spendings", json={**LUNCH, **patch}, headers=auth(token))
    assert r.status_code == 400
    assert client.get("/api/spendings", headers=auth(token)).json() == []


def test_delete_unknown_id_is_404_for_everyone(client):
    a = signup_and_signin(client, "alice", "a@x.com")
    b = signup_and_signin(client, "bob", "b@x.com")
    client.post("/api/spendings", json=LUNCH, headers=auth(a))
    for t in (a, b):
        assert client.delete("/api/spendings/4242", headers=auth(t)).status_code == 404


def test_malformed_record_id_is_400(client):
    token = signup_and_signin(client, "alice", "a@x.com")
    assert client.delete("/api/spendings/abc", headers=auth(token)).status_code == 400


def test_single_record_read_is_owner_only(client):
    a = signup_and_signin(client, "alice", "a@x.com")
    b = signup_and_signin(client, "bob", "b@x.com")
    rid = client.post("/api/spendings", json=LUNCH, headers=auth(a)).json()["id"]
    assert client.get(f"/api/spendings/{rid}", headers=auth(a)).json()["description"] == "lunch"
    assert client.get(f"/api/spendings/{rid}", headers=auth(b)).status_code == 403


def test_summary_and_export_are_scoped(client):
    a = signup_and_signin(client, "alice", "a@x.com")
    b = signup_and_signin(client, "bob", "b@x.com")
    client.post("/api/spendings", json=LUNCH, headers=auth(a))
    client.post("/api/spendings", json={**LUNCH, "amount": "7", "category": "HEALTH"}, headers=auth(a))
    client.post("/api/spendings", json={**LUNCH, "description": "bob-only"}, headers=auth(b))

    summary = client.get("/api/spendings/summary", headers=auth(a)).json()
    assert summary["total"] == "19.50"
    assert [c["category"] for c in summary["categories"]] == ["FOOD", "HEALTH"]

    r = client.get("/api/spendings/export.csv", headers=auth(a))
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    lines = r.text.strip().splitlines()
    assert lines[0] == "id,date,category,amount,description"
    assert len(lines) == 3
    assert "bob-only" not in r.text


def test_failing_mailer_does_not_fail_signup(settings, caplog):
    class BrokenMailer:
        def send_simple_message(self, to, subject, body):
            raise ConnectionError("smtp down")

    client = TestClient(create_app(settings, mailer=BrokenMailer()))
    with caplog.at_level(logging.ERROR, logger="finmate.services.email_service"):
        r = client.post("/api/auth/signup", json={"username": "alice", "email": "a@x.com", "password": "pw"})
    assert r.status_code == 200
    assert "Could not send confirmation email" in caplog.text


def test_secrets_never_reach_the_logs(client, caplog):
    with caplog.at_level(logging.DEBUG):
        token = signup_and_signin(client, "alice", "a@x.com", password="hunter2-password")
        client.get("/api/spendings", headers=auth(token))
        client.get("/api/spendings", headers=auth(token + "x"))
    assert "alice" in caplog.text
    assert "hunter2-password" not in caplog.text
    assert token not in caplog.text
    assert TEST_SECRET not in caplog.text


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_seeded_demo_account_can_sign_in():
    client = TestClient(create_app(Settings(secret_key=TEST_SECRET, seed_demo=True)))
    r = client.post("/api/auth/signin", json={"username": "demo", "password": "password"})
    assert r.status_code == 200
    spendings = client.get("/api/spendings", headers=auth(r.json()["token"])).json()
    assert len(spendings) == 60


def test_load_settings_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("FINMATE_SECRET_KEY", "from-env")
    monkeypatch.setenv("FINMATE_TOKEN_TTL", "120")
    monkeypatch.setenv("FINMATE_USERS_PATH", str(tmp_path / "users.yml"))
    monkeypatch.setenv("FINMATE_SEED_DEMO", "yes")
    s = load_settings()
    assert s.token_ttl_seconds == 120
    assert s.users_path == (tmp_path / "users.yml").resolve()
    assert s.spendings_path is None
    assert s.seed_demo is True
    assert "from-env" not in repr(s)


def test_missing_secret_fails_at_startup(monkeypatch):
    monkeypatch.delenv("FINMATE_SECRET_KEY", raising=False)
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(RuntimeError):
        create_app()
