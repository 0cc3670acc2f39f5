# Overview: Service-layer operations for auth; credential checks and administrator seeding.

"""
Authentication Service

Credentials are stored the way the legacy database has them: plaintext.
All comparisons go through verify_password(), which also accepts bcrypt
hashes, so accounts can be migrated to hashed passwords one at a time
without touching the login flow.

SECURITY NOTES:
- Plaintext storage is a known deficiency kept for compatibility
- Plaintext comparison is constant-time (hmac.compare_digest)
- Failed logins never say whether the username or the password was wrong
"""

from __future__ import annotations

import hmac

import bcrypt
from flask import current_app

from ..errors import BadRequest, InvalidCredentials
from ..extensions import db
from ..models import User, ADMIN_ROLE
from . import session_service
from .session_service import SessionUser


BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_bcrypt_hash(stored: str) -> bool:
    return stored.startswith(BCRYPT_PREFIXES)


def hash_password(password: str) -> str:
    """Hash password using bcrypt with cost factor 12."""
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, stored: str | None) -> bool:
    """
    Compare a candidate password against the stored credential.

    Returns True on match. Bcrypt hashes are checked with bcrypt, anything
    else is treated as plaintext and compared exactly.
    """
    if stored is None:
        return False

    if is_bcrypt_hash(stored):
        try:
            return bcrypt.checkpw(password.encode('utf-8'), stored.encode('utf-8'))
        except ValueError:
            return False

    return hmac.compare_digest(password.encode('utf-8'), stored.encode('utf-8'))


def _clean_credential(value) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def authenticate(username: str, password: str) -> User | None:
    """
    Look up a user by username and verify the password.

    Returns User if credentials valid, None otherwise.
    """
    user = db.session.query(User).filter(User.username == username).first()
    if not user:
        return None
    if not verify_password(password, user.password):
        return None
    return user


def login(username, password) -> tuple[str, SessionUser]:
    """
    Authenticate and open a session.

    Raises BadRequest when either credential is missing or blank and
    InvalidCredentials when no user matches. Returns (token, snapshot).
    """
    username = _clean_credential(username)
    password = _clean_credential(password)
    if username is None or password is None:
        raise BadRequest("username and password required")

    username = username.strip()
    user = authenticate(username, password)
    if not user:
        current_app.logger.warning("Rejected login for %r", username)
        raise InvalidCredentials()

    token, snapshot = session_service.create_session(user)
    current_app.logger.info("User %s logged in", user.username)
    return token, snapshot


def logout(token: str, user: SessionUser | None = None) -> None:
    session_service.revoke_session(token)
    if user is not None:
        current_app.logger.info("User %s logged out", user.username)


def create_user(
    username: str,
    password: str,
    *,
    first_name: str = "",
    last_name: str = "",
    role: str = "user",
    department: str | None = None,
    hashed: bool = False,
) -> User:
    """
    Create a user.

    Raises ValueError if the username is taken or blank. With hashed=True
    the password is stored as a bcrypt hash instead of plaintext.
    """
    username = (username or "").strip()
    if not username:
        raise ValueError("Username is required")
    if not password:
        raise ValueError("Password is required")

    existing = db.session.query(User).filter_by(username=username).first()
    if existing:
        raise ValueError("Username already exists")

    user = User(
        username=username,
        password=hash_password(password) if hashed else password,
        first_name=first_name or "",
        last_name=last_name or "",
        role=role or "user",
        department=department,
    )
    db.session.add(user)
    db.session.commit()
    return user


def ensure_default_admin() -> User | None:
    """
    Seed the administrator account when the users table is empty.

    Returns the created user, or None if any user already exists.
    """
    if db.session.query(User).first() is not None:
        return None

    user = User(
        username=current_app.config["ADMIN_USERNAME"],
        password=current_app.config["ADMIN_PASSWORD"],
        first_name="Administrator",
        last_name="",
        role=ADMIN_ROLE,
        department="",
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("Seeded administrator account %r", user.username)
    return user
