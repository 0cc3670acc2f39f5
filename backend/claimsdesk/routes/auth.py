# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/claimsdesk/routes/auth.py
"""
Authentication API routes

- POST /api/auth/login   -> {token, user}
- POST /api/auth/logout  -> {ok: true}
- GET  /api/auth/me      -> {user}

Tokens are opaque and live in process memory (see session_service).
"""

from flask import Blueprint, request, jsonify, g

from ..services import auth_service
from ..decorators import require_auth
from ..errors import ClaimsError
from . import error_response, internal_error


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Token must be included in Authorization header for protected routes.
    """
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}

        token, user = auth_service.login(data.get("username"), data.get("password"))
        return jsonify({"token": token, "user": user.to_dict()}), 200

    except ClaimsError as exc:
        return error_response(exc)
    except Exception:
        return internal_error("Failed to login user")


@auth_bp.post("/logout")
@require_auth
def logout_route():
    """Revoke the caller's session token."""
    auth_service.logout(g.session_token, g.current_user)
    return jsonify({"ok": True}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({"user": g.current_user.to_dict()}), 200
