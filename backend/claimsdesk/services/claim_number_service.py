# Overview: Service-layer operations for claim numbers; derives the next NZG-<year>-<seq> value.

"""
Claim Number Generator

Numbers look like NZG-2026-007: prefix, year, then a sequence that restarts
every year. The sequence is at least three digits wide and grows past that
(NZG-2026-1000) without being cut.

The next number is derived by scanning existing values, not from a counter
table. Two requests creating claims in the same year at the same moment can
both read the same maximum and produce the same number; nothing serializes
allocation.
"""

from __future__ import annotations

import re

from sqlalchemy import Connection, select

from .claim_store import claims_table


SEQUENCE_WIDTH = 3

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def year_prefix(year: int, prefix: str = "NZG") -> str:
    return f"{prefix}-{year}-"


def parse_sequence(value: str | None, year_prefix_: str) -> int:
    """
    Sequence part of a claim number, or 0 when it is missing or non-numeric.

    Only leading digits count: 'NZG-2026-012a' -> 12.
    """
    if not value or not value.startswith(year_prefix_):
        return 0
    match = _LEADING_DIGITS.match(value[len(year_prefix_):])
    return int(match.group(1)) if match else 0


def format_claim_number(year: int, sequence: int, prefix: str = "NZG") -> str:
    return f"{year_prefix(year, prefix)}{sequence:0{SEQUENCE_WIDTH}d}"


def next_claim_number(
    conn: Connection,
    *,
    table: str,
    column: str,
    year: int,
    prefix: str = "NZG",
) -> str:
    """Scan existing numbers for `year` and return the one after the highest."""
    head = year_prefix(year, prefix)
    claims = claims_table(table, [column])
    col = claims.c[column]

    stmt = select(col).where(col.startswith(head, autoescape=True))
    highest = 0
    for (value,) in conn.execute(stmt):
        highest = max(highest, parse_sequence(value if isinstance(value, str) else None, head))

    return format_claim_number(year, highest + 1, prefix)
