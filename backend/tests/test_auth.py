"""Tests for registration, login, token resolution and the profile endpoints."""
from datetime import datetime, timedelta, timezone

from jose import jwt

from eventflow.auth import google
from eventflow.auth.dependencies import extract_token
from eventflow.auth.google import GoogleIdentity
from eventflow.auth.security import create_access_token, decode_access_token, hash_password, verify_password
from eventflow.config import settings
from eventflow.models.event import Event
from eventflow.models.guest import Guest
from eventflow.models.user import User
from tests.conftest import add_guest, auth_headers, create_test_event, register_user


class TestSecurityHelpers:

    def test_password_round_trip(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    def test_passwordless_account_never_matches(self):
        assert not verify_password("anything", None)

    def test_token_carries_user_id(self):
        claims = decode_access_token(create_access_token("user-1"))
        assert claims["userId"] == "user-1"
        assert "exp" in claims


class TestExtractToken:
    """Cookie wins over the bearer header; malformed headers are ignored."""

    class _Request:
        def __init__(self, cookies=None, headers=None):
            self.cookies = cookies or {}
            self.headers = headers or {}

    def test_cookie_first(self):
        request = self._Request(cookies={"jwt": "from-cookie"}, headers={"Authorization": "Bearer from-header"})
        assert extract_token(request) == "from-cookie"

    def test_bearer_fallback(self):
        assert extract_token(self._Request(headers={"Authorization": "Bearer abc"})) == "abc"

    def test_malformed_header(self):
        assert extract_token(self._Request(headers={"Authorization": "Bearer"})) is None
        assert extract_token(self._Request(headers={"Authorization": "Token abc"})) is None
        assert extract_token(self._Request(headers={"Authorization": "Bearer a b"})) is None

    def test_nothing(self):
        assert extract_token(self._Request()) is None


class TestRegisterAndLogin:

    def test_register_sets_cookie(self, client):
        resp = client.post("/auth/register", json={"name": "Ana", "email": "Ana@Example.com", "password": "secret123"})
        assert resp.status_code == 201
        data = resp.json()
        assert data["email"] == "ana@example.com"
        assert data["token"]
        assert resp.cookies.get("jwt") == data["token"]

    def test_duplicate_email_conflict(self, client):
        register_user(client, email="dup@example.com")
        resp = client.post("/auth/register", json={"name": "X", "email": "dup@example.com", "password": "secret123"})
        assert resp.status_code == 409

    def test_short_password_reports_field_error(self, client):
        resp = client.post("/auth/register", json={"name": "X", "email": "x@example.com", "password": "123"})
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["formErrors"] == []
        assert "password" in detail["fieldErrors"]

    def test_login(self, client):
        register_user(client, email="login@example.com", password="secret123")
        resp = client.post("/auth/login", json={"email": "login@example.com", "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["email"] == "login@example.com"

    def test_login_wrong_password(self, client):
        register_user(client, email="login@example.com", password="secret123")
        resp = client.post("/auth/login", json={"email": "login@example.com", "password": "nope-nope"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Credenciais inválidas"

    def test_logout_clears_cookie(self, client):
        resp = client.post("/auth/logout")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
        assert "jwt=" in resp.headers["set-cookie"]


class TestIdentityResolution:

    def test_bearer_header(self, client):
        user = register_user(client, name="Bia", email="bia@example.com")
        resp = client.get("/auth/profile", headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json()["id"] == user["id"]
        assert resp.json()["role"] == "USER"

    def test_cookie(self, client):
        register_user(client, email="cookie@example.com")
        client.post("/auth/login", json={"email": "cookie@example.com", "password": "secret123"})
        resp = client.get("/auth/profile")
        assert resp.status_code == 200
        assert resp.json()["email"] == "cookie@example.com"

    def test_cookie_takes_precedence(self, client):
        a = register_user(client, email="a@example.com")
        b = register_user(client, email="b@example.com")
        client.post("/auth/login", json={"email": "a@example.com", "password": "secret123"})
        resp = client.get("/auth/profile", headers=auth_headers(b))
        assert resp.json()["id"] == a["id"]

    def test_missing_token(self, client):
        resp = client.get("/auth/profile")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Não autenticado"

    def test_garbage_token(self, client):
        resp = client.get("/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token inválido"

    def test_expired_token(self, client):
        user = register_user(client)
        token = create_access_token(user["id"], expires_delta=timedelta(seconds=-10))
        resp = client.get("/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token inválido"

    def test_foreign_signature(self, client):
        user = register_user(client)
        token = jwt.encode(
            {"userId": user["id"], "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "someone-elses-secret",
            algorithm=settings.JWT_ALGORITHM,
        )
        resp = client.get("/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_token_without_user_claim(self, client):
        token = jwt.encode(
            {"sub": "x", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        resp = client.get("/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token inválido"

    def test_deleted_user(self, client):
        token = create_access_token("00000000-0000-0000-0000-000000000000")
        resp = client.get("/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Usuário não encontrado"


class TestBans:
    """Banned accounts are refused on guarded writes until the ban ends."""

    def _ban(self, db, user: dict, until=None, reason="Spam"):
        db.query(User).filter(User.id == user["id"]).update({
            User.is_banned: True,
            User.banned_at: datetime.now(timezone.utc),
            User.banned_until: until,
            User.ban_reason: reason,
        })
        db.commit()

    def test_permanent_ban_blocks_event_creation(self, client, db):
        user = register_user(client)
        self._ban(db, user)
        resp = client.post("/events", json={"title": "x", "date": "2030-01-01T10:00:00Z"}, headers=auth_headers(user))
        assert resp.status_code == 403
        assert "permanentemente" in resp.json()["detail"]

    def test_active_suspension_blocks(self, client, db):
        user = register_user(client)
        self._ban(db, user, until=datetime.now(timezone.utc) + timedelta(days=3))
        resp = client.post("/events", json={"title": "x", "date": "2030-01-01T10:00:00Z"}, headers=auth_headers(user))
        assert resp.status_code == 403
        assert "suspensa" in resp.json()["detail"]

    def test_expired_suspension_is_lifted(self, client, db):
        user = register_user(client)
        self._ban(db, user, until=datetime.now(timezone.utc) - timedelta(hours=1))
        resp = client.post("/events", json={"title": "x", "date": "2030-01-01T10:00:00Z"}, headers=auth_headers(user))
        assert resp.status_code == 201

        db.expire_all()
        row = db.query(User).filter(User.id == user["id"]).one()
        assert row.is_banned is False
        assert row.banned_until is None

    def test_admin_routes_reject_regular_users(self, client):
        user = register_user(client)
        resp = client.get("/moderation/stats", headers=auth_headers(user))
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Acesso restrito a administradores"


class TestGoogleLogin:

    def test_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "")
        resp = client.post("/auth/google", json={"credential": "abc"})
        assert resp.status_code == 503

    def test_rejected_credential(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "client-id")
        monkeypatch.setattr(google, "verify_google_id_token", lambda credential: None)
        resp = client.post("/auth/google", json={"credential": "abc"})
        assert resp.status_code == 401

    def test_creates_then_reuses_account(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "client-id")
        identity = GoogleIdentity(email="gabi@example.com", name="Gabi", email_verified=True)
        monkeypatch.setattr(google, "verify_google_id_token", lambda credential: identity)

        first = client.post("/auth/google", json={"credential": "abc"})
        second = client.post("/auth/google", json={"credential": "abc"})
        assert first.status_code == 200
        assert first.json()["name"] == "Gabi"
        assert second.json()["id"] == first.json()["id"]

    def test_unverified_email_refused(self, client, db, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "client-id")
        identity = GoogleIdentity(email="gabi@example.com", name="Gabi", email_verified=False)
        monkeypatch.setattr(google, "verify_google_id_token", lambda credential: identity)

        resp = client.post("/auth/google", json={"credential": "abc"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Email do Google não verificado"
        assert db.query(User).filter(User.email == "gabi@example.com").first() is None

    def test_google_account_cannot_password_login(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "client-id")
        identity = GoogleIdentity(email="gabi@example.com", name="Gabi", email_verified=True)
        monkeypatch.setattr(google, "verify_google_id_token", lambda credential: identity)
        client.post("/auth/google", json={"credential": "abc"})

        resp = client.post("/auth/login", json={"email": "gabi@example.com", "password": "whatever"})
        assert resp.status_code == 401


class TestProfile:

    def test_update_requires_a_field(self, client):
        user = register_user(client)
        resp = client.patch("/auth/profile", json={}, headers=auth_headers(user))
        assert resp.status_code == 400

    def test_update_name(self, client):
        user = register_user(client)
        resp = client.patch("/auth/profile", json={"name": "Novo Nome"}, headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json()["name"] == "Novo Nome"

    def test_email_in_use(self, client):
        register_user(client, email="taken@example.com")
        user = register_user(client, email="me@example.com")
        resp = client.patch("/auth/profile", json={"email": "taken@example.com"}, headers=auth_headers(user))
        assert resp.status_code == 409

    def test_change_password(self, client):
        user = register_user(client, email="pw@example.com", password="secret123")
        wrong = client.patch(
            "/auth/password", json={"current_password": "wrong-one", "new_password": "newsecret"},
            headers=auth_headers(user),
        )
        assert wrong.status_code == 400

        ok = client.patch(
            "/auth/password", json={"current_password": "secret123", "new_password": "newsecret"},
            headers=auth_headers(user),
        )
        assert ok.status_code == 200
        login = client.post("/auth/login", json={"email": "pw@example.com", "password": "newsecret"})
        assert login.status_code == 200


class TestDeleteAccount:

    def test_wrong_password(self, client):
        user = register_user(client)
        resp = client.delete("/auth/account", params={"password": "wrong-pw"}, headers=auth_headers(user))
        assert resp.status_code == 400

    def test_removes_events_and_invitations(self, client, db):
        owner = register_user(client, email="owner@example.com")
        leaving = register_user(client, email="leaving@example.com")
        own_event = create_test_event(client, leaving)
        add_guest(client, leaving, own_event["id"], "someone@example.com")
        other_event = create_test_event(client, owner)
        add_guest(client, owner, other_event["id"], "leaving@example.com")

        resp = client.delete("/auth/account", params={"password": "secret123"}, headers=auth_headers(leaving))
        assert resp.status_code == 200

        assert db.query(User).filter(User.id == leaving["id"]).first() is None
        assert db.query(Event).filter(Event.id == own_event["id"]).first() is None
        assert db.query(Guest).filter(Guest.email == "leaving@example.com").count() == 0
        assert db.query(Guest).filter(Guest.event_id == own_event["id"]).count() == 0
        assert db.query(Event).filter(Event.id == other_event["id"]).first() is not None
