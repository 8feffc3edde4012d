"""Client tests against an in-process ``format``-paramstyle driver.

The fake cursor interpolates arguments with ``%`` the way PyMySQL does, so
these tests show exactly which text would be sent to a MySQL server.
"""
from __future__ import annotations

from typing import Any

import pytest

from crudql.errors import EmptyFieldsError, StatementError
from crudql.execute.client import Client
from crudql.execute.connectors import Connector
from crudql.schema.config import ClientConfig


class FormatDriverError(Exception):
    pass


class FormatCursor:
    def __init__(self, sent: list[str]) -> None:
        self._sent = sent
        self.description = [("name",)]
        self.lastrowid = 0
        self.rowcount = 0

    def execute(self, query: str, args: Any = None) -> None:
        if args is not None:
            try:
                query = query % tuple(repr(a) for a in args)
            except (TypeError, ValueError) as exc:
                raise FormatDriverError(str(exc)) from exc
        self._sent.append(query)
        self.rowcount = 1

    def fetchall(self) -> list[tuple]:
        return [("bennett",)]

    def fetchone(self) -> tuple:
        return ("bennett",)

    def close(self) -> None:
        pass


class FormatConnection:
    def __init__(self) -> None:
        self.sent: list[str] = []
        self.commits = 0

    def cursor(self) -> FormatCursor:
        return FormatCursor(self.sent)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        pass

    def close(self) -> None:
        pass


class FormatConnector(Connector):
    def connect(self, config: ClientConfig) -> Any:
        return FormatConnection()

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        return (FormatDriverError,)


@pytest.fixture()
def fmt_conn() -> FormatConnection:
    return FormatConnection()


@pytest.fixture()
def mysql_client(fmt_conn: FormatConnection) -> Client:
    return Client(
        ClientConfig(target="mysql", result_shape="associative"),
        connection=fmt_conn,
        connector=FormatConnector(),
    )


def test_unbound_query_text_is_sent_untouched(mysql_client: Client, fmt_conn: FormatConnection):
    sql = "SELECT name FROM users WHERE name LIKE 'ben%'"
    assert mysql_client.get_results(sql) == [{"name": "bennett"}]
    assert fmt_conn.sent == [sql]


def test_none_params_sends_text_untouched(mysql_client: Client, fmt_conn: FormatConnection):
    mysql_client.query("UPDATE users SET note = '100%' WHERE id = 1", None)
    assert fmt_conn.sent == ["UPDATE users SET note = '100%' WHERE id = 1"]


def test_bound_query_is_interpolated_by_driver(mysql_client: Client, fmt_conn: FormatConnection):
    mysql_client.get_row("SELECT name FROM users WHERE id = %s", [44])
    assert fmt_conn.sent == ["SELECT name FROM users WHERE id = '44'"]


def test_insert_with_only_literals_sends_no_bindings(
    mysql_client: Client, fmt_conn: FormatConnection
):
    mysql_client.insert("sessions", {"created": "NOW()"})
    assert fmt_conn.sent == ["INSERT INTO sessions (created) VALUES (NOW())"]
    assert fmt_conn.commits == 1


def test_driver_error_is_wrapped(mysql_client: Client):
    with pytest.raises(StatementError) as info:
        mysql_client.get_row("SELECT %s, %s", [1])
    assert isinstance(info.value.__cause__, FormatDriverError)


def test_invalid_input_never_reaches_driver(mysql_client: Client, fmt_conn: FormatConnection):
    with pytest.raises(EmptyFieldsError):
        mysql_client.insert("users", {})
    assert fmt_conn.sent == []
    assert mysql_client.total_queries() == 0
