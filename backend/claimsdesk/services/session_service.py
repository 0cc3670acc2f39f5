# Overview: Service-layer operations for sessions; in-memory token store bound to the app.

"""
Session Token Management Service

Sessions live in process memory only. The store is created empty with the
app, entries are removed on logout, and the whole map is dropped when the
process exits (or the app is torn down in tests). Nothing is persisted, so
a restart logs every user out.

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Sessions hold an immutable snapshot of the user taken at login
- Optional max-age expiry (SESSION_MAX_AGE); off by default
- All mutations are guarded by a lock, requests run on multiple threads
"""

from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from flask import current_app

from ..models import User, compose_full_name, ADMIN_ROLE


@dataclass(frozen=True)
class SessionUser:
    """Snapshot of the authenticated user, taken at login."""
    id: int
    username: str
    full_name: str
    role: str
    department: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            id=user.id,
            username=user.username,
            full_name=compose_full_name(user.first_name, user.last_name),
            role=user.role,
            department=user.department or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "fullName": self.full_name,
            "role": self.role,
            "department": self.department,
        }


@dataclass
class SessionRecord:
    user: SessionUser
    created_at: datetime = field(default_factory=datetime.utcnow)


def generate_token() -> str:
    """
    Generate cryptographically secure random token.

    Returns 64-character hex string (32 bytes of entropy).
    """
    return secrets.token_hex(32)


class SessionStore:
    """Thread-safe token -> SessionRecord map."""

    def __init__(self, max_age: timedelta | None = None):
        self._sessions: dict[str, SessionRecord] = {}
        self._lock = threading.Lock()
        self.max_age = max_age

    def create(self, user: SessionUser) -> str:
        token = generate_token()
        with self._lock:
            while token in self._sessions:
                token = generate_token()
            self._sessions[token] = SessionRecord(user=user)
        return token

    def get(self, token: str) -> SessionUser | None:
        with self._lock:
            record = self._sessions.get(token)
            if record is None:
                return None
            if self.max_age is not None and datetime.utcnow() - record.created_at > self.max_age:
                del self._sessions[token]
                return None
            return record.user

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def init_app(app) -> SessionStore:
    max_age = app.config.get("SESSION_MAX_AGE")
    store = SessionStore(max_age=timedelta(seconds=max_age) if max_age else None)
    app.extensions["session_store"] = store
    return store


def get_store() -> SessionStore:
    return current_app.extensions["session_store"]


def create_session(user: User) -> tuple[str, SessionUser]:
    """
    Create a new session for an authenticated user.

    Returns (plaintext_token, snapshot).
    """
    snapshot = SessionUser.from_user(user)
    token = get_store().create(snapshot)
    return token, snapshot


def validate_session(token: str) -> SessionUser | None:
    """Return the session's user snapshot, or None for unknown/expired tokens."""
    if not token:
        return None
    return get_store().get(token)


def revoke_session(token: str) -> bool:
    """
    Revoke session token.

    Returns True if session was revoked, False if not found.
    """
    return get_store().revoke(token)
