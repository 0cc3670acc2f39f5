# Overview: Service-layer operations for department enrichment of listed claims.

"""
Department Enrichment

Older claims were stored without a department. When listing, such rows get
the department of the user whose full name matches the row's reporter. The
match is an exact string comparison on 'first last', so it breaks on name
collisions or formatting differences; callers only see it through
DepartmentDirectory, which a keyed lookup can replace.

Nothing is written back to the store.
"""

from __future__ import annotations

from sqlalchemy import Connection, select

from ..models import User, compose_full_name


DEFAULT_DEPARTMENT_KEY = "department"


class DepartmentDirectory:
    """Full name -> department lookup."""

    def __init__(self, departments: dict[str, str] | None = None):
        self._departments = dict(departments or {})

    @classmethod
    def from_connection(cls, conn: Connection) -> "DepartmentDirectory":
        users = User.__table__
        rows = conn.execute(select(users.c.first_name, users.c.last_name, users.c.department))
        departments = {}
        for first_name, last_name, department in rows:
            departments[compose_full_name(first_name, last_name)] = department or ""
        return cls(departments)

    def lookup(self, full_name) -> str:
        if not isinstance(full_name, str):
            return ""
        return self._departments.get(full_name, "")


def enrich_departments(
    rows: list[dict],
    directory: DepartmentDirectory,
    *,
    reporter_column: str | None,
    department_column: str | None,
) -> list[dict]:
    """
    Fill an empty department from the reporter's directory entry.

    Rows that already carry a non-empty department are left untouched.
    Without a department column the value lands under 'department'.
    """
    key = department_column or DEFAULT_DEPARTMENT_KEY
    for row in rows:
        current = row.get(key)
        if current is not None and str(current).strip():
            continue
        reporter = row.get(reporter_column) if reporter_column else None
        row[key] = directory.lookup(reporter)
    return rows
