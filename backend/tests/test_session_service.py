"""In-memory session store and credential comparison."""

import threading
from datetime import timedelta

import pytest

from claimsdesk.services.auth_service import hash_password, is_bcrypt_hash, verify_password
from claimsdesk.services.session_service import SessionStore, SessionUser


def _user(user_id=1, role="user"):
    return SessionUser(id=user_id, username=f"u{user_id}", full_name=f"User {user_id}", role=role, department="QA")


class TestSessionStore:

    def test_create_get_revoke(self):
        store = SessionStore()
        token = store.create(_user())

        assert store.get(token) == _user()
        assert store.revoke(token) is True
        assert store.get(token) is None
        assert store.revoke(token) is False

    def test_unknown_token(self):
        assert SessionStore().get("nope") is None

    def test_no_expiry_by_default(self):
        store = SessionStore()
        token = store.create(_user())
        store._sessions[token].created_at -= timedelta(days=365)
        assert store.get(token) is not None

    def test_optional_max_age(self):
        store = SessionStore(max_age=timedelta(hours=1))
        token = store.create(_user())
        store._sessions[token].created_at -= timedelta(hours=2)

        assert store.get(token) is None
        assert len(store) == 0

    def test_clear(self):
        store = SessionStore()
        store.create(_user(1))
        store.create(_user(2))
        store.clear()
        assert len(store) == 0

    def test_concurrent_create_and_revoke(self):
        store = SessionStore()
        tokens = []
        lock = threading.Lock()

        def login_many(user_id):
            for _ in range(200):
                token = store.create(_user(user_id))
                with lock:
                    tokens.append(token)

        threads = [threading.Thread(target=login_many, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(tokens) == len(set(tokens)) == 1600
        assert len(store) == 1600

        halves = [tokens[i::2] for i in range(2)]
        threads = [
            threading.Thread(target=lambda chunk=chunk: [store.revoke(t) for t in chunk])
            for chunk in halves
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 0

    def test_snapshot_to_dict(self):
        assert _user(3, role="admin").to_dict() == {
            "id": 3,
            "username": "u3",
            "fullName": "User 3",
            "role": "admin",
            "department": "QA",
        }
        assert _user(3, role="admin").is_admin
        assert not _user(3).is_admin


class TestVerifyPassword:

    def test_plaintext(self):
        assert verify_password("pw", "pw")
        assert not verify_password("pw", "pw ")
        assert not verify_password("", "pw")

    def test_missing_stored_credential(self):
        assert not verify_password("pw", None)

    def test_bcrypt(self):
        stored = hash_password("s3cret")
        assert is_bcrypt_hash(stored)
        assert verify_password("s3cret", stored)
        assert not verify_password("S3cret", stored)

    @pytest.mark.parametrize("stored", ["$2b$12$broken", "$2a$"])
    def test_malformed_bcrypt_hash(self, stored):
        assert not verify_password("anything", stored)
