#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import NamedTuple

import pymssql

from check_mssql.connection import Connection, Cursor
from check_mssql.utils.exceptions import EmptyResultError, ExtractionError, QueryError
from check_mssql.utils.log import logger, VERBOSE
from check_mssql.utils.timeout import Budget


class FirstRow(NamedTuple):
    columns: Sequence[str]
    values: Sequence[object]


@contextmanager
def execute(connection: Connection, query: str, budget: Budget) -> Iterator[Cursor]:
    """Run the query within what is left of the budget

    The cursor (and all rows not read) is released on exit.
    """
    if (seconds := budget.driver_seconds()) <= 0:
        logger.warning("query error: time budget used up")
        raise QueryError("query error: time budget used up before the query")
    connection.set_query_timeout(seconds)

    cursor = connection.cursor()
    try:
        try:
            cursor.execute(query)
        except pymssql.Error as e:
            logger.warning("query error: %s", e)
            raise QueryError(f"query error: {e}") from e
        yield cursor
    finally:
        cursor.close()


def fetch_first_row(cursor: Cursor) -> FirstRow:
    # Statements without a result set (e.g. an UPDATE) have no description.
    if cursor.description is None:
        logger.warning("query returned no rows")
        raise EmptyResultError()

    try:
        row = cursor.fetchone()
    except pymssql.Error as e:
        logger.warning("error scanning row: %s", e)
        raise ExtractionError(f"error scanning row: {e}") from e

    if row is None:
        logger.warning("query returned no rows")
        raise EmptyResultError()

    try:
        columns = [str(column[0]) for column in cursor.description]
    except (TypeError, IndexError) as e:
        logger.warning("error getting columns: %s", e)
        raise ExtractionError(f"error getting columns: {e}") from e

    if len(columns) != len(row):
        logger.warning("error scanning row: %d columns, %d values", len(columns), len(row))
        raise ExtractionError(
            f"error scanning row: expected {len(columns)} values, got {len(row)}"
        )

    logger.log(VERBOSE, "first row: %s", dict(zip(columns, row)))
    return FirstRow(columns, tuple(row))


def query_first_row(connection: Connection, query: str, budget: Budget) -> FirstRow:
    with execute(connection, query, budget) as cursor:
        return fetch_first_row(cursor)
