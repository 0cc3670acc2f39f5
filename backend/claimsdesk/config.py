# backend/claimsdesk/config.py
from __future__ import annotations
import os

from sqlalchemy.pool import NullPool


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url
    # Plain file path, as used by the legacy Node server
    return "sqlite:///" + os.environ.get("DB_PATH", "reklamacje.db")


def _csv(name: str, default: str) -> tuple[str, ...]:
    raw = os.environ.get(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # One short-lived connection per request, no pooling
    SQLALCHEMY_ENGINE_OPTIONS = {"poolclass": NullPool}

    CLAIMS_TABLE = os.environ.get("CLAIMS_TABLE", "reklamacje")

    # Reserved columns are located by case-insensitive name match
    CLAIMS_CLAIM_NUMBER_COLUMNS = _csv("CLAIMS_CLAIM_NUMBER_COLUMNS", "claim_number,numer_reklamacji")
    CLAIMS_STATUS_COLUMNS = _csv("CLAIMS_STATUS_COLUMNS", "status")
    CLAIMS_SUBMISSION_DATE_COLUMNS = _csv("CLAIMS_SUBMISSION_DATE_COLUMNS", "submission_date,data_zgloszenia")
    CLAIMS_CREATED_AT_COLUMNS = _csv("CLAIMS_CREATED_AT_COLUMNS", "created_at,data_utworzenia")
    CLAIMS_REPORTER_COLUMNS = _csv("CLAIMS_REPORTER_COLUMNS", "reporter,zglaszajacy")
    CLAIMS_DEPARTMENT_COLUMNS = _csv("CLAIMS_DEPARTMENT_COLUMNS", "department,dzial")

    CLAIM_NUMBER_PREFIX = os.environ.get("CLAIM_NUMBER_PREFIX", "NZG")
    DEFAULT_CLAIM_STATUS = os.environ.get("DEFAULT_CLAIM_STATUS", "Nowe")

    # Seeded when the users table is empty
    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin")

    # Seconds; None keeps sessions until logout or restart
    SESSION_MAX_AGE = int(os.environ["SESSION_MAX_AGE"]) if os.environ.get("SESSION_MAX_AGE") else None

    CORS_ORIGINS = _csv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
    )

    AUTO_BOOTSTRAP = os.environ.get("AUTO_BOOTSTRAP", "true").lower() == "true"

    PORT = int(os.environ.get("PORT", "3001"))
