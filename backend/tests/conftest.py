"""
Pytest fixtures for claims backend tests.

Provides a throwaway SQLite file per test, the claims table, users with
known credentials, a test client, and login helpers.
"""

import pytest
from sqlalchemy import text

from claimsdesk import create_app
from claimsdesk.extensions import db
from claimsdesk.models import User


CLAIMS_DDL = """
CREATE TABLE reklamacje (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    claim_number TEXT,
    submission_date TEXT,
    created_at TEXT,
    status TEXT,
    reporter TEXT,
    department TEXT,
    customer TEXT,
    description TEXT
)
"""


def make_app(db_path, **overrides):
    config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'AUTO_BOOTSTRAP': False,
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture(scope='function')
def claims_ddl():
    """DDL for the claims table; override in a module to test other layouts."""
    return CLAIMS_DDL


@pytest.fixture(scope='function')
def app(tmp_path, claims_ddl):
    """Create application backed by a fresh SQLite file."""
    app = make_app(tmp_path / "claims.sqlite3")

    with app.app_context():
        db.create_all()
        with db.engine.begin() as conn:
            conn.execute(text(claims_ddl))
        yield app
        db.session.remove()
        db.engine.dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


def _add_user(username, password, first_name, last_name, role="user", department=None) -> User:
    user = User(
        username=username,
        password=password,
        first_name=first_name,
        last_name=last_name,
        role=role,
        department=department,
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture(scope='function')
def admin_user(app):
    """Administrator: sees and edits every claim."""
    return _add_user("ada", "adminpw", "Ada", "Admin", role="admin", department="Zarząd")


@pytest.fixture(scope='function')
def alice(app):
    return _add_user("alice", "pw", "Alice", "Nowak", department="QA")


@pytest.fixture(scope='function')
def bob(app):
    return _add_user("bob", "bobpw", "Bob", "Kowalski", department="Serwis")


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    assert response.status_code == 200, response.get_json()
    return response.get_json()['token']


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, "ada", "adminpw"))


@pytest.fixture(scope='function')
def alice_headers(client, alice):
    return auth_headers(get_auth_token(client, "alice", "pw"))


@pytest.fixture(scope='function')
def bob_headers(client, bob):
    return auth_headers(get_auth_token(client, "bob", "bobpw"))


def insert_claim(**values) -> int:
    """Insert a claim row directly, bypassing the API. Returns its rowid."""
    columns = ", ".join(values)
    params = ", ".join(f":{name}" for name in values)
    with db.engine.begin() as conn:
        result = conn.execute(text(f"INSERT INTO reklamacje ({columns}) VALUES ({params})"), values)
        return result.lastrowid


def fetch_claim(row_id: int) -> dict | None:
    with db.engine.connect() as conn:
        row = conn.execute(
            text("SELECT rowid AS _rowid_, * FROM reklamacje WHERE rowid = :id"), {"id": row_id}
        ).mappings().first()
    return dict(row) if row is not None else None
