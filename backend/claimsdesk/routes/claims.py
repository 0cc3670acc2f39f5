# Overview: Flask API routes for claims operations; parses input and returns JSON responses.

import re

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth
from ..errors import BadRequest, ClaimsError, NotFound
from ..services import claims_service
from . import error_response, internal_error


claims_bp = Blueprint("claims", __name__, url_prefix="/api/claims")

_ROW_ID = re.compile(r"-?\d+")

# SQLite rowids are signed 64-bit integers
ROW_ID_MIN = -(2 ** 63)
ROW_ID_MAX = 2 ** 63 - 1


def parse_row_id(raw: str) -> int:
    """
    Row ids must be integers; checked before the store is touched.

    Integers outside the rowid range cannot name a row and give NotFound.
    """
    raw = (raw or "").strip()
    if not _ROW_ID.fullmatch(raw):
        raise BadRequest("Invalid row id.")
    row_id = int(raw)
    if not ROW_ID_MIN <= row_id <= ROW_ID_MAX:
        raise NotFound()
    return row_id


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@claims_bp.get("/schema")
@require_auth
def schema_route():
    try:
        return jsonify(claims_service.describe_schema()), 200
    except ClaimsError as exc:
        return error_response(exc)
    except Exception:
        return internal_error("Failed to read claims schema")


@claims_bp.get("")
@require_auth
def list_claims_route():
    try:
        return jsonify(claims_service.list_claims(g.current_user)), 200
    except ClaimsError as exc:
        return error_response(exc)
    except Exception:
        return internal_error("Failed to list claims")


@claims_bp.post("")
@require_auth
def create_claim_route():
    try:
        row = claims_service.create_claim(g.current_user, _payload())
        return jsonify(row), 201
    except ClaimsError as exc:
        return error_response(exc)
    except Exception:
        return internal_error("Failed to create claim")


@claims_bp.put("/<row_id>")
@require_auth
def update_claim_route(row_id: str):
    try:
        row = claims_service.update_claim(g.current_user, parse_row_id(row_id), _payload())
        return jsonify(row), 200
    except ClaimsError as exc:
        return error_response(exc)
    except Exception:
        return internal_error("Failed to update claim")


@claims_bp.delete("/<row_id>")
@require_auth
def delete_claim_route(row_id: str):
    try:
        result = claims_service.delete_claim(g.current_user, parse_row_id(row_id))
        return jsonify(result), 200
    except ClaimsError as exc:
        return error_response(exc)
    except Exception:
        return internal_error("Failed to delete claim")
