# Overview: Service-layer operations for schema introspection of the claims table.

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Connection, inspect
from sqlalchemy.exc import CompileError, NoSuchTableError

from ..errors import StoreError


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    type: str
    not_null: bool
    has_default: bool
    primary_key: bool

    @property
    def required(self) -> bool:
        """Must be supplied on insert: not null, no default, not the key."""
        return self.not_null and not self.has_default and not self.primary_key

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "notNull": self.not_null,
            "hasDefault": self.has_default,
            "primaryKey": self.primary_key,
            "required": self.required,
        }


@dataclass(frozen=True)
class TableSchema:
    table: str
    columns: tuple[ColumnInfo, ...]

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def writable_columns(self) -> set[str]:
        return {c.name for c in self.columns if not c.primary_key}

    @property
    def required_columns(self) -> list[str]:
        return [c.name for c in self.columns if c.required]

    def find(self, candidates) -> str | None:
        """
        Locate a reserved column by case-insensitive name.

        Candidates are tried in order; returns the column's real name.
        """
        by_lower = {c.name.lower(): c.name for c in self.columns}
        for candidate in candidates:
            found = by_lower.get(candidate.lower())
            if found is not None:
                return found
        return None

    def to_list(self) -> list[dict]:
        return [c.to_dict() for c in self.columns]


def _type_name(coltype, conn: Connection) -> str:
    # SQLite allows untyped columns, which reflect as NullType
    try:
        return coltype.compile(dialect=conn.dialect)
    except CompileError:
        return ""


def get_columns(conn: Connection, table: str) -> list[ColumnInfo]:
    """
    Read the live column set of `table`, in declared order.

    Raises StoreError if the table does not exist.
    """
    inspector = inspect(conn)
    try:
        raw_columns = inspector.get_columns(table)
        pk = set(inspector.get_pk_constraint(table).get("constrained_columns") or [])
    except NoSuchTableError as exc:
        raise StoreError(f"Failed to read table {table}: no such table") from exc

    if not raw_columns:
        raise StoreError(f"Failed to read table {table}: no such table")

    return [
        ColumnInfo(
            name=col["name"],
            type=_type_name(col["type"], conn),
            not_null=not col.get("nullable", True),
            has_default=col.get("default") is not None,
            primary_key=col["name"] in pk,
        )
        for col in raw_columns
    ]


def get_schema(conn: Connection, table: str) -> TableSchema:
    return TableSchema(table=table, columns=tuple(get_columns(conn, table)))


@dataclass(frozen=True)
class ReservedColumns:
    """Real names of the columns with server-side semantics (None when absent)."""
    claim_number: str | None
    status: str | None
    submission_date: str | None
    created_at: str | None
    reporter: str | None
    department: str | None

    @property
    def names(self) -> set[str]:
        return {
            name for name in (
                self.claim_number,
                self.status,
                self.submission_date,
                self.created_at,
                self.reporter,
                self.department,
            )
            if name is not None
        }


def resolve_reserved(schema: TableSchema, config) -> ReservedColumns:
    return ReservedColumns(
        claim_number=schema.find(config["CLAIMS_CLAIM_NUMBER_COLUMNS"]),
        status=schema.find(config["CLAIMS_STATUS_COLUMNS"]),
        submission_date=schema.find(config["CLAIMS_SUBMISSION_DATE_COLUMNS"]),
        created_at=schema.find(config["CLAIMS_CREATED_AT_COLUMNS"]),
        reporter=schema.find(config["CLAIMS_REPORTER_COLUMNS"]),
        department=schema.find(config["CLAIMS_DEPARTMENT_COLUMNS"]),
    )
