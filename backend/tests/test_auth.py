"""
Authentication tests.

Verifies:
- Login returns an opaque token and the user snapshot
- Wrong username and wrong password are indistinguishable (401)
- Missing or blank credentials return 400
- Logout invalidates the token
- Every claims endpoint returns 401 without a valid token
- The administrator is seeded only into an empty users table
"""

import pytest

from claimsdesk.extensions import db
from claimsdesk.models import User
from claimsdesk.services.auth_service import hash_password

from conftest import auth_headers, get_auth_token, make_app


class TestLogin:
    """POST /api/auth/login."""

    def test_login_valid_credentials(self, client, alice):
        resp = client.post("/api/auth/login", json={"username": "alice", "password": "pw"})
        assert resp.status_code == 200

        data = resp.get_json()
        assert len(data["token"]) == 64
        assert data["user"] == {
            "id": alice.id,
            "username": "alice",
            "fullName": "Alice Nowak",
            "role": "user",
            "department": "QA",
        }

    def test_each_login_gets_a_new_token(self, client, alice):
        first = get_auth_token(client, "alice", "pw")
        second = get_auth_token(client, "alice", "pw")
        assert first != second

    def test_login_invalid_password(self, client, alice):
        resp = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid credentials"}

    def test_login_nonexistent_user(self, client, alice):
        """Same response as a wrong password, no username enumeration."""
        resp = client.post("/api/auth/login", json={"username": "mallory", "password": "pw"})
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid credentials"}

    def test_password_compared_exactly(self, client, alice):
        resp = client.post("/api/auth/login", json={"username": "alice", "password": "PW"})
        assert resp.status_code == 401

    def test_username_is_trimmed(self, client, alice):
        resp = client.post("/api/auth/login", json={"username": "  alice ", "password": "pw"})
        assert resp.status_code == 200

    @pytest.mark.parametrize(
        "body",
        [
            {"username": "alice"},
            {"password": "pw"},
            {"username": "   ", "password": "pw"},
            {"username": "alice", "password": "  "},
            {"username": "alice", "password": 123},
            {},
        ],
    )
    def test_login_missing_fields(self, client, alice, body):
        resp = client.post("/api/auth/login", json=body)
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_login_without_json_body(self, client, alice):
        resp = client.post("/api/auth/login", data="username=alice", content_type="text/plain")
        assert resp.status_code == 400

    def test_full_name_trimmed_when_last_name_empty(self, client, app):
        db.session.add(User(username="solo", password="pw", first_name="Solo", last_name="", role="user"))
        db.session.commit()

        resp = client.post("/api/auth/login", json={"username": "solo", "password": "pw"})
        assert resp.get_json()["user"]["fullName"] == "Solo"

    def test_login_with_bcrypt_hashed_password(self, client, app):
        db.session.add(User(
            username="hashed",
            password=hash_password("s3cret"),
            first_name="Hash",
            last_name="Ed",
            role="user",
        ))
        db.session.commit()

        ok = client.post("/api/auth/login", json={"username": "hashed", "password": "s3cret"})
        assert ok.status_code == 200
        bad = client.post("/api/auth/login", json={"username": "hashed", "password": "s3cret!"})
        assert bad.status_code == 401


class TestSessionLifecycle:
    """Logout and /me."""

    def test_me_returns_snapshot(self, client, alice_headers):
        resp = client.get("/api/auth/me", headers=alice_headers)
        assert resp.status_code == 200
        assert resp.get_json()["user"]["fullName"] == "Alice Nowak"

    def test_logout_revokes_token(self, client, alice_headers):
        resp = client.post("/api/auth/logout", headers=alice_headers)
        assert resp.status_code == 200
        assert resp.get_json() == {"ok": True}

        assert client.get("/api/claims", headers=alice_headers).status_code == 401
        assert client.post("/api/auth/logout", headers=alice_headers).status_code == 401

    def test_logout_only_affects_own_session(self, client, alice):
        first = auth_headers(get_auth_token(client, "alice", "pw"))
        second = auth_headers(get_auth_token(client, "alice", "pw"))

        client.post("/api/auth/logout", headers=first)

        assert client.get("/api/auth/me", headers=first).status_code == 401
        assert client.get("/api/auth/me", headers=second).status_code == 200

    def test_snapshot_is_not_refreshed(self, client, alice, alice_headers):
        """Renaming the user after login does not change the session."""
        alice.last_name = "Zielinska"
        db.session.commit()

        resp = client.get("/api/auth/me", headers=alice_headers)
        assert resp.get_json()["user"]["fullName"] == "Alice Nowak"

    def test_sessions_do_not_survive_restart(self, tmp_path, client, alice, alice_headers):
        """A second app (process restart) starts with an empty session store."""
        restarted = make_app(tmp_path / "claims.sqlite3")
        resp = restarted.test_client().get("/api/auth/me", headers=alice_headers)
        assert resp.status_code == 401


class TestAuthGate:
    """All protected endpoints return 401 without a valid token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/api/auth/logout"),
            ("GET", "/api/auth/me"),
            ("GET", "/api/claims/schema"),
            ("GET", "/api/claims"),
            ("POST", "/api/claims"),
            ("PUT", "/api/claims/1"),
            ("DELETE", "/api/claims/1"),
        ],
    )
    def test_requires_auth(self, client, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.get_json() == {"error": "Authentication required"}

    @pytest.mark.parametrize("header", ["Bearer deadbeef", "Bearer ", "Token abc", "deadbeef"])
    def test_rejects_unknown_or_malformed_token(self, client, header):
        resp = client.get("/api/claims", headers={"Authorization": header})
        assert resp.status_code == 401

    def test_invalid_row_id_still_needs_auth(self, client):
        """The gate runs before any input parsing."""
        assert client.put("/api/claims/abc", json={}).status_code == 401


class TestAdminSeeding:
    """Administrator bootstrap on startup."""

    def test_seeds_admin_into_empty_users_table(self, tmp_path):
        app = make_app(tmp_path / "fresh.sqlite3", AUTO_BOOTSTRAP=True, ADMIN_PASSWORD="start")

        with app.app_context():
            users = db.session.query(User).all()
            assert len(users) == 1
            assert users[0].username == "admin"
            assert users[0].role == "admin"

        resp = app.test_client().post("/api/auth/login", json={"username": "admin", "password": "start"})
        assert resp.status_code == 200
        assert resp.get_json()["user"]["role"] == "admin"

    def test_restart_does_not_seed_again(self, tmp_path):
        db_path = tmp_path / "fresh.sqlite3"
        make_app(db_path, AUTO_BOOTSTRAP=True)
        app = make_app(db_path, AUTO_BOOTSTRAP=True)

        with app.app_context():
            assert db.session.query(User).count() == 1

    def test_no_admin_when_users_exist(self, app, alice):
        from claimsdesk.services.auth_service import ensure_default_admin

        assert ensure_default_admin() is None
        assert db.session.query(User).filter_by(role="admin").count() == 0
