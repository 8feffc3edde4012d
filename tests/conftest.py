"""Shared pytest fixtures for crudQL unit and integration tests."""
from __future__ import annotations

import sqlite3

import pytest

from crudql.compile.builder import StatementBuilder
from crudql.execute.client import Client
from crudql.schema.config import ClientConfig
from tests.fixtures import open_sqlite


@pytest.fixture()
def builder() -> StatementBuilder:
    """Default builder: ``?`` placeholders, bare identifiers."""
    return StatementBuilder()


@pytest.fixture()
def mysql_builder() -> StatementBuilder:
    return StatementBuilder("mysql")


@pytest.fixture()
def conn() -> sqlite3.Connection:
    connection = open_sqlite()
    yield connection
    connection.close()


@pytest.fixture()
def client(conn: sqlite3.Connection) -> Client:
    """Client over the sample schema returning structured rows."""
    return Client(ClientConfig(target="sqlite"), connection=conn)


@pytest.fixture()
def assoc_client(conn: sqlite3.Connection) -> Client:
    """Client over the sample schema returning dict rows."""
    return Client(
        ClientConfig(target="sqlite", result_shape="associative"), connection=conn
    )
