# Overview: Service-layer operations for row access; admin sees all, others only their own rows.

from __future__ import annotations

from flask import current_app
from sqlalchemy import Connection, select

from ..errors import Forbidden, NotFound
from .claim_store import ROW_ID, claims_table, rowid
from .schema_service import TableSchema
from .session_service import SessionUser


def can_access(row: dict, user: SessionUser, reporter_column: str | None) -> bool:
    """
    Whether `user` may read or change `row`.

    Admins always may. Without a reporter column there is nothing to check
    ownership against, so everyone may.
    """
    if user.is_admin:
        return True
    if reporter_column is None:
        return True
    return row.get(reporter_column) == user.full_name


def load_row(conn: Connection, schema: TableSchema, row_id: int) -> dict | None:
    claims = claims_table(schema.table, schema.names)
    stmt = select(rowid().label(ROW_ID), *claims.c).where(rowid() == row_id)
    row = conn.execute(stmt).mappings().first()
    return dict(row) if row is not None else None


def require_row_access(
    conn: Connection,
    schema: TableSchema,
    row_id: int,
    user: SessionUser,
    *,
    reporter_column: str | None,
) -> dict:
    """
    Load a row and check the caller may mutate it.

    Raises NotFound if the row is absent, Forbidden if it belongs to
    someone else. Returns the row.
    """
    row = load_row(conn, schema, row_id)
    if row is None:
        raise NotFound()

    if not can_access(row, user, reporter_column):
        current_app.logger.warning(
            "User %s denied access to %s row %s", user.username, schema.table, row_id
        )
        raise Forbidden("You can only modify claims you reported.")

    return row
