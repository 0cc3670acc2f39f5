# Overview: Error taxonomy shared by services and routes; each error carries its HTTP status.

from __future__ import annotations


class ClaimsError(Exception):
    """Base class for request-level failures turned into {"error": ...} responses."""

    status_code = 500


class BadRequest(ClaimsError):
    """400-level input problem (missing credentials, invalid row id)."""

    status_code = 400


class NoFieldsProvided(BadRequest):
    """Raised when a write ends up with nothing to store."""

    def __init__(self, message: str = "No editable fields provided."):
        super().__init__(message)


class MissingRequiredFields(BadRequest):
    """Raised when not-null columns without a default are left unset."""

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class Unauthorized(ClaimsError):
    status_code = 401


class InvalidCredentials(Unauthorized):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class Forbidden(ClaimsError):
    status_code = 403


class NotFound(ClaimsError):
    status_code = 404

    def __init__(self, message: str = "Claim row not found."):
        super().__init__(message)


class StoreError(ClaimsError):
    """The underlying store failed to open, query or execute."""

    status_code = 500
