"""Result-shape adapters: DB-API cursor → caller-facing values."""
from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from crudql.schema.config import ResultShape


def column_names(cursor: Any) -> list[str]:
    """Return the column names of the cursor's current result set."""
    if not cursor.description:
        return []
    return [col[0] for col in cursor.description]


def make_row(columns: list[str], raw: Any, shape: ResultShape) -> Any:
    """Convert one driver row into the configured shape.

    ``structured`` rows allow ``row.name``; ``associative`` rows are dicts.
    Duplicate column names keep the last value.
    """
    data = dict(zip(columns, raw))
    if shape == "structured":
        return SimpleNamespace(**data)
    return data


def fetch_one(cursor: Any, shape: ResultShape) -> Any | None:
    """Return the first row, or ``None`` when the result set is empty."""
    raw = cursor.fetchone()
    if raw is None:
        return None
    return make_row(column_names(cursor), raw, shape)


def fetch_all(cursor: Any, shape: ResultShape) -> list[Any]:
    """Return every row; an empty list when there are none."""
    columns = column_names(cursor)
    return [make_row(columns, raw, shape) for raw in cursor.fetchall()]


def fetch_scalar(cursor: Any) -> Any | None:
    """Return the first column of the first row, or ``None``."""
    raw = cursor.fetchone()
    if raw is None:
        return None
    return raw[0]


def last_insert_id(cursor: Any) -> int | None:
    """Return the id generated by an INSERT, or ``None`` when there is none."""
    last = getattr(cursor, "lastrowid", None)
    return last or None


def affected_rows(cursor: Any) -> int:
    """Return the number of rows a write touched (never negative)."""
    count = getattr(cursor, "rowcount", -1)
    return count if count is not None and count >= 0 else 0
