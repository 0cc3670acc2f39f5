# Overview: Scoped per-request connections to the claims store.

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from flask import current_app
from sqlalchemy import Connection, column, literal_column, table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.expression import TableClause

from ..errors import StoreError
from ..extensions import db


ROW_ID = "_rowid_"


def claims_table_name() -> str:
    return current_app.config["CLAIMS_TABLE"]


@contextmanager
def open_store(*, write: bool = False, action: str = "access claims store") -> Iterator[Connection]:
    """
    Open a fresh connection for the duration of one request.

    Write connections commit when the block exits cleanly and roll back if
    it raises. The connection is released on every exit path. Driver errors
    surface as StoreError; ClaimsError raised inside the block passes through.
    """
    try:
        ctx = db.engine.begin() if write else db.engine.connect()
        with ctx as conn:
            yield conn
    except SQLAlchemyError as exc:
        current_app.logger.exception("Failed to %s", action)
        detail = getattr(exc, "orig", None) or exc
        raise StoreError(f"Failed to {action}: {detail}") from exc


def claims_table(name: str, column_names: list[str]) -> TableClause:
    """
    Lightweight table construct over the introspected columns.

    Columns are untyped so values go to the driver exactly as received.
    """
    return table(name, *(column(c) for c in column_names))


def rowid():
    return literal_column("rowid")
