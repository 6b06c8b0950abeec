#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Run one SQL check: connect, query, format and classify under a single deadline"""

from functools import partial

from check_mssql.classify import (
    CheckResult,
    classify,
    failure_result,
    timeout_message,
    timeout_result,
)
from check_mssql.connection import connect_pymssql, Connector, open_connection
from check_mssql.query import query_first_row
from check_mssql.settings import CheckSettings, ConnectionDescriptor
from check_mssql.utils.exceptions import DeadlineExceeded, MKCheckError
from check_mssql.utils.log import logger
from check_mssql.utils.statename import State
from check_mssql.utils.timeout import Budget, Deadline
from check_mssql.values import format_row, FormattedResult


def run_pipeline(
    settings: CheckSettings, connector: Connector, budget: Budget | None = None
) -> FormattedResult:
    # Probe and query share one budget, each statement only gets what is left.
    if budget is None:
        budget = Budget(settings.timeout)
    descriptor = ConnectionDescriptor.from_settings(settings)
    with open_connection(connector, descriptor, budget) as connection:
        first_row = query_first_row(connection, settings.query, budget)
    return format_row(first_row.values)


def run_check(
    settings: CheckSettings,
    connector: Connector = connect_pymssql,
    *,
    debug: bool = False,
) -> CheckResult:
    deadline = Deadline(settings.timeout, message=timeout_message(settings.host, settings.timeout))
    try:
        result = deadline.run(partial(run_pipeline, settings, connector))
    except DeadlineExceeded as e:
        return timeout_result(e)
    except MKCheckError as e:
        return failure_result(e)
    except Exception as e:
        if debug:
            raise
        logger.error("unexpected error while checking %s", settings.host, exc_info=True)
        return CheckResult(State.CRIT, str(e))

    return classify(result, settings.pattern)
