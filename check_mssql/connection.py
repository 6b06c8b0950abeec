#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Open and verify the connection to the SQL Server"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Protocol

import pymssql

from check_mssql.settings import ConnectionDescriptor
from check_mssql.utils.exceptions import ConnectError
from check_mssql.utils.log import logger, VERBOSE
from check_mssql.utils.timeout import Budget

_PROBE_QUERY = "SELECT 1"


class Cursor(Protocol):
    @property
    def description(self) -> Sequence[Sequence[Any]] | None: ...

    def execute(self, operation: str) -> object: ...

    def fetchone(self) -> Sequence[object] | None: ...

    def fetchall(self) -> Sequence[Sequence[object]]: ...

    def close(self) -> None: ...


class Connection(Protocol):
    def cursor(self) -> Cursor: ...

    def set_query_timeout(self, seconds: int) -> None: ...

    def close(self) -> None: ...


class Connector(Protocol):
    def __call__(self, descriptor: ConnectionDescriptor) -> Connection: ...


class PymssqlConnection:
    def __init__(self, connection: pymssql.Connection) -> None:
        self._connection = connection

    def cursor(self) -> Cursor:
        return self._connection.cursor()

    def set_query_timeout(self, seconds: int) -> None:
        # pymssql only exposes the statement timeout on the underlying _mssql connection
        self._connection._conn.query_timeout = seconds  # pylint: disable=protected-access

    def close(self) -> None:
        self._connection.close()


def connect_pymssql(descriptor: ConnectionDescriptor) -> Connection:
    connection = pymssql.connect(
        server=descriptor.server,
        port=str(descriptor.port),
        user=descriptor.user,
        password=descriptor.password,
        database=descriptor.database or "",
        login_timeout=descriptor.driver_timeout,
        timeout=descriptor.driver_timeout,
        appname="check_mssql",
    )
    return PymssqlConnection(connection)


def ping(connection: Connection, budget: Budget) -> None:
    if (seconds := budget.driver_seconds()) <= 0:
        logger.warning("can't ping server: time budget used up")
        raise ConnectError("can't ping server: time budget used up")
    connection.set_query_timeout(seconds)

    cursor = connection.cursor()
    try:
        cursor.execute(_PROBE_QUERY)
        cursor.fetchall()
    except pymssql.Error as e:
        logger.warning("can't ping server: %s", e)
        raise ConnectError(f"can't ping server: {e}") from e
    finally:
        cursor.close()


@contextmanager
def open_connection(
    connector: Connector, descriptor: ConnectionDescriptor, budget: Budget
) -> Iterator[Connection]:
    """Yield a connection that answered the reachability probe

    The probe only gets what is left of the budget after the login. The
    connection is closed when the block is left, whichever way.
    """
    logger.debug("connecting to database: %r", descriptor)
    try:
        connection = connector(descriptor)
    except pymssql.Error as e:
        logger.warning("can't connect to server: %s", e)
        raise ConnectError(f"can't connect to server: {e}") from e

    try:
        ping(connection, budget)
        logger.log(VERBOSE, "connected to %s:%d", descriptor.server, descriptor.port)
        yield connection
    finally:
        connection.close()
