# Overview: Shared helpers for route modules.

from flask import current_app, jsonify

from ..errors import ClaimsError


def error_response(exc: ClaimsError):
    """Turn a ClaimsError into the standard {"error": ...} response."""
    if exc.status_code >= 500:
        current_app.logger.error("%s", exc)
    return jsonify({"error": str(exc)}), exc.status_code


def internal_error(message: str):
    current_app.logger.exception(message)
    return jsonify({"error": "Internal server error"}), 500
