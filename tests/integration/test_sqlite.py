"""Integration tests: build → execute against a real SQLite in-memory DB.

Covers every client operation, both result shapes, literal markers evaluated
by the database, driver failures, the query counter, the connection lock
and connection lifecycle.
"""
from __future__ import annotations

import logging
import sqlite3
import threading

import pytest

import crudql
from crudql.errors import (
    ConnectionUnavailableError,
    EmptyFieldsError,
    ExecutionTimeoutError,
    InvalidLimitError,
    MissingConditionError,
    StatementError,
)
from crudql.execute.client import Client
from crudql.schema.config import ClientConfig
from crudql.schema.literals import NULL
from tests.fixtures import FIXED_NOW, FIXED_UNIX, load_ddl, register_time_functions


def _seed(client: Client) -> list[int]:
    return [
        client.insert("users", {"name": "Bennett", "email": "b@example.com", "created": "NOW()"}),
        client.insert("users", {"name": "Alice", "email": "a@example.com", "active": 0}),
        client.insert("users", {"name": "Carol", "email": None, "seen_at": "UNIX_TIMESTAMP()"}),
    ]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def test_insert_returns_last_id(client: Client):
    ids = _seed(client)
    assert ids == [1, 2, 3]
    assert client.lastid() == 3
    assert client.affected() == 1


def test_insert_literal_markers_are_evaluated(client: Client):
    _seed(client)
    row = client.get_row("SELECT created, seen_at FROM users WHERE name = ?", ["Bennett"])
    assert row.created == FIXED_NOW
    row = client.get_row("SELECT seen_at FROM users WHERE name = ?", "Carol")
    assert row.seen_at == FIXED_UNIX


def test_insert_null_marker(client: Client):
    user_id = client.insert("users", {"name": "Dan", "note": "NULL", "email": NULL})
    row = client.get_row("SELECT note, email FROM users WHERE id = ?", [user_id])
    assert row.note is None
    assert row.email is None


def test_insert_empty_fields_fails_fast(client: Client):
    with pytest.raises(EmptyFieldsError):
        client.insert("users", {})
    assert client.total_queries() == 0


def test_update_returns_affected_rows(client: Client):
    _seed(client)
    assert client.update("users", {"active": 0, "created": "NOW()"}, {"active": 1}) == 2
    assert client.num_rows("SELECT COUNT(*) FROM users WHERE active = ?", [0]) == 3
    assert client.num_rows(
        "SELECT COUNT(*) FROM users WHERE created = ?", [FIXED_NOW]
    ) == 2


def test_update_whole_table(client: Client):
    _seed(client)
    assert client.update("users", {"note": "bulk"}) == 3


def test_update_no_match_is_zero_not_error(client: Client):
    _seed(client)
    assert client.update("users", {"name": "X"}, {"id": 999}) == 0


def test_update_invalid_limit_fails_fast(client: Client):
    with pytest.raises(InvalidLimitError):
        client.update("users", {"name": "X"}, {"id": 1}, limit="1; DROP TABLE users")
    assert client.table_exists("users")


def test_delete(client: Client):
    _seed(client)
    assert client.delete("users", {"name": "Alice", "active": 0}) == 1
    assert client.num_rows("SELECT COUNT(*) FROM users") == 2


def test_delete_requires_condition(client: Client):
    _seed(client)
    with pytest.raises(MissingConditionError):
        client.delete("users", {})
    assert client.num_rows("SELECT COUNT(*) FROM users") == 3


# ---------------------------------------------------------------------------
# Reads and result shapes
# ---------------------------------------------------------------------------


def test_get_results_structured(client: Client):
    _seed(client)
    users = client.get_results("SELECT name, email FROM users ORDER BY name ASC")
    assert [u.name for u in users] == ["Alice", "Bennett", "Carol"]
    assert users[2].email is None


def test_get_results_associative(assoc_client: Client):
    _seed(assoc_client)
    users = assoc_client.get_results("SELECT id, name FROM users WHERE active = ? ORDER BY id", [1])
    assert users == [{"id": 1, "name": "Bennett"}, {"id": 3, "name": "Carol"}]


def test_empty_results_are_not_errors(client: Client):
    assert client.get_results("SELECT * FROM users") == []
    assert client.get_row("SELECT * FROM users WHERE id = ?", [1]) is None
    assert client.num_rows("SELECT name FROM users") is None
    assert client.num_rows("SELECT COUNT(*) FROM users") == 0


def test_get_row_with_in_placeholders(assoc_client: Client):
    _seed(assoc_client)
    ids = [1, 3]
    sql = (
        "SELECT COUNT(*) AS n FROM users "
        f"WHERE id IN ({assoc_client.in_placeholders(ids)})"
    )
    assert assoc_client.get_row(sql, ids) == {"n": 2}


def test_execute_built_statement(client: Client):
    stmt = client.builder.build_insert("users", {"name": "Eve"})
    assert client.execute(stmt) == 1
    stmt = client.builder.build_select_all("SELECT name FROM users")
    assert [r.name for r in client.execute(stmt)] == ["Eve"]


def test_query_returns_last_insert_id(client: Client):
    assert client.query("INSERT INTO users (name) VALUES (?)", ["Zed"]) == 1
    assert client.query("SELECT 1") in (None, 1)


# ---------------------------------------------------------------------------
# Schema helpers
# ---------------------------------------------------------------------------


def test_table_exists(client: Client):
    assert client.table_exists("users") is True
    assert client.table_exists("ghosts") is False
    assert client.table_exists("users' OR '1'='1") is False


def test_list_fields(client: Client):
    assert client.list_fields("users") == [
        "id", "name", "email", "active", "created", "seen_at", "note",
    ]
    assert client.num_fields("user_data") == 3


def test_truncate(client: Client):
    ids = _seed(client)
    client.insert("user_data", {"user_id": ids[0], "setting": "theme", "content": "dark"})
    assert client.truncate(["user_data", " users "]) == 2
    assert client.num_rows("SELECT COUNT(*) FROM users") == 0
    assert client.truncate([]) == 0


# ---------------------------------------------------------------------------
# Errors, counter and logging
# ---------------------------------------------------------------------------


def test_driver_error_is_typed_and_chained(client: Client):
    with pytest.raises(StatementError) as info:
        client.insert("ghosts", {"name": "Boo"})
    assert isinstance(info.value.__cause__, sqlite3.OperationalError)
    assert info.value.sql == "INSERT INTO ghosts (name) VALUES (?)"
    assert info.value.params == ("Boo",)


def test_constraint_violation(client: Client):
    with pytest.raises(StatementError) as info:
        client.insert("users", {"email": "no-name@example.com"})
    assert isinstance(info.value.__cause__, sqlite3.IntegrityError)


@pytest.mark.parametrize(
    "fields, cause",
    [
        ({"name": "B", "seen_at": 2**64}, OverflowError),
        ({"name": "\ud800"}, UnicodeEncodeError),
    ],
)
def test_binding_failure_is_statement_error(
    client: Client, caplog: pytest.LogCaptureFixture, fields, cause
):
    with caplog.at_level(logging.ERROR, logger="crudql"):
        with pytest.raises(StatementError) as info:
            client.insert("users", fields)
    assert isinstance(info.value.__cause__, cause)
    assert any(r.levelno == logging.ERROR for r in caplog.records)
    assert client.num_rows("SELECT COUNT(*) FROM users") == 0


def test_driver_error_is_logged(client: Client, caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.DEBUG, logger="crudql"):
        with pytest.raises(StatementError):
            client.get_results("SELECT * FROM ghosts")
    messages = [r.getMessage() for r in caplog.records]
    assert any("SQL Query: SELECT * FROM ghosts" in m for m in messages)
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_query_counter(client: Client):
    assert client.total_queries() == 0
    _seed(client)
    client.get_results("SELECT * FROM users")
    with pytest.raises(StatementError):
        client.query("SELECT * FROM ghosts")
    assert client.total_queries() == 5


def test_rows_survive_failed_statement(client: Client):
    _seed(client)
    with pytest.raises(StatementError):
        client.update("users", {"name": None}, {"id": 1})
    assert client.get_row("SELECT name FROM users WHERE id = ?", [1]).name == "Bennett"


# ---------------------------------------------------------------------------
# Concurrency and lifecycle
# ---------------------------------------------------------------------------


def test_concurrent_inserts_are_counted(client: Client):
    def worker(n: int) -> None:
        for i in range(25):
            client.insert("users", {"name": f"w{n}-{i}"})

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert client.total_queries() == 100
    assert client.num_rows("SELECT COUNT(*) FROM users") == 100


def test_timeout_when_connection_busy(client: Client):
    client._lock.acquire()
    try:
        with pytest.raises(ExecutionTimeoutError) as info:
            client.get_row("SELECT 1", timeout=0.05)
    finally:
        client._lock.release()
    assert info.value.timeout == 0.05
    assert client.total_queries() == 0


def test_closed_client_raises(conn: sqlite3.Connection):
    client = Client(ClientConfig(target="sqlite"), connection=conn)
    client.close()
    client.close()
    assert client.closed
    with pytest.raises(ConnectionUnavailableError):
        client.get_row("SELECT 1")


def test_client_opens_its_own_connection(tmp_path):
    path = tmp_path / "app.db"
    with crudql.connect(target="sqlite", database=str(path), results="assoc", debug=1) as db:
        register_time_functions(db._conn)
        for statement in load_ddl("sqlite").split(";"):
            if statement.strip():
                db.query(statement)
        db.insert("users", {"name": "Bennett", "created": "NOW()"})
    assert db.closed

    with Client({"target": "sqlite", "database": str(path)}) as db:
        assert db.get_row("SELECT name, created FROM users").created == FIXED_NOW


def test_unopenable_database_raises(tmp_path):
    missing = tmp_path / "no" / "such" / "dir" / "app.db"
    with pytest.raises(ConnectionUnavailableError):
        Client(ClientConfig(target="sqlite", database=str(missing)))
