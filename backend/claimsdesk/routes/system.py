# backend/claimsdesk/routes/system.py
"""
System health and version endpoints.
"""

import sys
import time
from flask import Blueprint, current_app
from sqlalchemy import func, select

from ..models import User
from ..services import session_service
from ..services.claim_store import claims_table_name, open_store
from ..services.schema_service import get_schema
from ..errors import ClaimsError
from ..time_utils import local_now

system_bp = Blueprint("system", __name__, url_prefix="/api")


def check_database_health() -> dict:
    """
    Check database connectivity and that the claims table is readable.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        with open_store(action="check database health") as conn:
            user_count = conn.execute(select(func.count()).select_from(User.__table__)).scalar()
            schema = get_schema(conn, claims_table_name())

        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "users": user_count,
                "claims_table": schema.table,
                "claims_columns": len(schema.columns),
            }
        }
    except ClaimsError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: database reachable and claims table readable
    - 503: otherwise
    """
    database_health = check_database_health()
    http_status = 200 if database_health["status"] == "healthy" else 503

    response = {
        "status": database_health["status"],
        "timestamp": local_now().isoformat(),
        "checks": {
            "database": database_health,
            "sessions": {"status": "healthy", "active": len(session_service.get_store())},
        }
    }

    return response, http_status


@system_bp.get("/version")
def version():
    """Non-sensitive deployment information."""
    env = "production" if not current_app.debug else "development"

    return {
        "api_version": "1.0.0",
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": local_now().isoformat(),
    }
