"""Test fixtures: sample schema DDL and SQLite connections with MySQL-style functions."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Literal

_FIXTURES_DIR = Path(__file__).parent

#: Value returned by the ``NOW()`` / ``TIMESTAMP()`` functions registered on test connections.
FIXED_NOW = "2026-10-19 12:00:00"

#: Value returned by ``UNIX_TIMESTAMP()`` on test connections.
FIXED_UNIX = 1792411200


def load_ddl(target: Literal["sqlite"] = "sqlite") -> str:
    """Return the sample DDL SQL string for the given backend."""
    return (_FIXTURES_DIR / f"ddl_{target}.sql").read_text()


def register_time_functions(conn: sqlite3.Connection) -> None:
    """Give SQLite the MySQL time functions the default literal registry names."""
    conn.create_function("NOW", 0, lambda: FIXED_NOW)
    conn.create_function("TIMESTAMP", 0, lambda: FIXED_NOW)
    conn.create_function("UNIX_TIMESTAMP", 0, lambda: FIXED_UNIX)


def open_sqlite() -> sqlite3.Connection:
    """Open an in-memory database with the sample schema loaded."""
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    register_time_functions(conn)
    conn.executescript(load_ddl("sqlite"))
    return conn
