# Overview: Service-layer operations for claims; schema-driven list/create/update/delete.

"""
Claims CRUD Engine

The claims table is owned by another system and its columns change over
time, so nothing here is modelled statically. Every call:

1. opens its own connection (claim_store.open_store),
2. introspects the table (schema_service),
3. checks ownership for writes (access_service),
4. filters client input to the live column set,
5. returns rows in their current shape, tagged with _rowid_.

Reserved columns (claim number, status, submission date, creation
timestamp, reporter, department) are always computed server-side on
create; client values for them are discarded.
"""

from __future__ import annotations

from datetime import date

from flask import current_app
from sqlalchemy import Connection, delete, insert, select, update

from ..errors import BadRequest, MissingRequiredFields, NoFieldsProvided, NotFound
from ..time_utils import timestamp_iso, to_json_value, today_iso
from . import access_service
from .claim_number_service import next_claim_number
from .claim_store import ROW_ID, claims_table, claims_table_name, open_store, rowid
from .department_service import DepartmentDirectory, enrich_departments
from .schema_service import ReservedColumns, TableSchema, get_schema, resolve_reserved
from .session_service import SessionUser


def _serialize(row: dict) -> dict:
    return {key: to_json_value(value) for key, value in row.items()}


def _context(conn: Connection) -> tuple[TableSchema, ReservedColumns]:
    schema = get_schema(conn, claims_table_name())
    return schema, resolve_reserved(schema, current_app.config)


def _filter_fields(payload, schema: TableSchema, *, exclude: set[str] = frozenset()) -> dict:
    """
    Keep only keys naming a writable column; unknown keys are dropped silently.

    Raises BadRequest when a kept value is a JSON object or array.
    """
    if not isinstance(payload, dict):
        return {}
    allowed = schema.writable_columns - set(exclude)
    fields = {key: value for key, value in payload.items() if key in allowed}
    for key, value in fields.items():
        # Columns hold scalars only
        if isinstance(value, (dict, list)):
            raise BadRequest(f"Invalid value for column {key}.")
    return fields


def describe_schema() -> list[dict]:
    with open_store(action=f"read schema of table {claims_table_name()}") as conn:
        schema = get_schema(conn, claims_table_name())
    return schema.to_list()


def list_claims(user: SessionUser) -> list[dict]:
    """
    Rows visible to `user`, ordered by row identity.

    Admins get every row. Others get rows whose reporter is their full name,
    or every row when the table has no reporter column.
    """
    table_name = claims_table_name()
    with open_store(action=f"read table {table_name}") as conn:
        schema, reserved = _context(conn)
        claims = claims_table(schema.table, schema.names)

        stmt = select(rowid().label(ROW_ID), *claims.c).order_by(rowid())
        if not user.is_admin and reserved.reporter is not None:
            stmt = stmt.where(claims.c[reserved.reporter] == user.full_name)

        rows = [dict(row) for row in conn.execute(stmt).mappings()]
        directory = DepartmentDirectory.from_connection(conn)

    enrich_departments(
        rows,
        directory,
        reporter_column=reserved.reporter,
        department_column=reserved.department,
    )
    return [_serialize(row) for row in rows]


def server_defaults(conn: Connection, schema: TableSchema, reserved: ReservedColumns, user: SessionUser) -> dict:
    """Values the server owns on create, for the reserved columns present in the table."""
    config = current_app.config
    values = {}
    if reserved.submission_date:
        values[reserved.submission_date] = today_iso()
    if reserved.status:
        values[reserved.status] = config["DEFAULT_CLAIM_STATUS"]
    if reserved.created_at:
        values[reserved.created_at] = timestamp_iso()
    if reserved.claim_number:
        values[reserved.claim_number] = next_claim_number(
            conn,
            table=schema.table,
            column=reserved.claim_number,
            year=date.today().year,
            prefix=config["CLAIM_NUMBER_PREFIX"],
        )
    if reserved.reporter:
        values[reserved.reporter] = user.full_name
    if reserved.department:
        values[reserved.department] = user.department
    return values


def create_claim(user: SessionUser, payload) -> dict:
    """
    Insert a new claim.

    Raises MissingRequiredFields naming every required column left unset,
    NoFieldsProvided when there is nothing to insert. Returns the stored row.
    """
    table_name = claims_table_name()
    with open_store(write=True, action=f"create row in table {table_name}") as conn:
        schema, reserved = _context(conn)

        fields = _filter_fields(payload, schema, exclude=reserved.names)
        values = {**fields, **server_defaults(conn, schema, reserved, user)}

        missing = [name for name in schema.required_columns if values.get(name) is None]
        if missing:
            raise MissingRequiredFields(missing)
        if not values:
            raise NoFieldsProvided()

        # Preserve declared column order in the INSERT
        ordered = {name: values[name] for name in schema.names if name in values}
        claims = claims_table(schema.table, list(ordered))
        result = conn.execute(insert(claims).values(ordered))
        row_id = result.lastrowid

        row = access_service.load_row(conn, schema, row_id)

    current_app.logger.info("User %s created %s row %s", user.username, table_name, row_id)
    return _serialize(row)


def update_claim(user: SessionUser, row_id: int, payload) -> dict:
    """
    Overwrite the given columns of one claim.

    Raises NotFound/Forbidden from the access check, NoFieldsProvided when
    nothing writable is left, NotFound if the row vanished before the write.
    """
    table_name = claims_table_name()
    with open_store(write=True, action=f"update row in table {table_name}") as conn:
        schema, reserved = _context(conn)
        access_service.require_row_access(
            conn, schema, row_id, user, reporter_column=reserved.reporter
        )

        exclude = set()
        if not user.is_admin and reserved.reporter is not None:
            exclude.add(reserved.reporter)
        fields = _filter_fields(payload, schema, exclude=exclude)
        if not fields:
            raise NoFieldsProvided()

        claims = claims_table(schema.table, list(fields))
        result = conn.execute(update(claims).where(rowid() == row_id).values(fields))
        if not result.rowcount:
            raise NotFound()

        row = access_service.load_row(conn, schema, row_id)

    if row is None:
        raise NotFound()
    return _serialize(row)


def delete_claim(user: SessionUser, row_id: int) -> dict:
    table_name = claims_table_name()
    with open_store(write=True, action=f"delete row from table {table_name}") as conn:
        schema, reserved = _context(conn)
        access_service.require_row_access(
            conn, schema, row_id, user, reporter_column=reserved.reporter
        )

        claims = claims_table(schema.table, schema.names)
        result = conn.execute(delete(claims).where(rowid() == row_id))
        if not result.rowcount:
            raise NotFound()

    current_app.logger.info("User %s deleted %s row %s", user.username, table_name, row_id)
    return {"ok": True, "rowId": row_id}
