#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import re
from dataclasses import dataclass

from check_mssql.utils.exceptions import DeadlineExceeded, MKCheckError, PatternError
from check_mssql.utils.log import logger
from check_mssql.utils.statename import service_state_name, State
from check_mssql.values import FormattedResult

_PREFIX = "SQL"


@dataclass(frozen=True)
class CheckResult:
    state: State
    summary: str
    perfdata: str | None = None

    def output(self) -> str:
        """
        >>> CheckResult(State.OK, "1;2", "1;2").output()
        'SQL OK: 1;2|1;2'
        >>> CheckResult(State.CRIT, "query returned no rows").output()
        'SQL CRITICAL: query returned no rows'
        """
        text = f"{_PREFIX} {service_state_name(self.state, 'UNKNOWN')}: {self.summary}"
        if self.perfdata is None:
            return text
        return f"{text}|{self.perfdata}"


def compile_pattern(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(f"Invalid regex: {e}") from e


def classify(result: FormattedResult, pattern: str | None) -> CheckResult:
    """Map the formatted first row onto a check result

    A matching pattern flags the row as CRITICAL, everything else is OK. The
    pattern is searched anywhere in the joined text, not per column.
    """
    if pattern:
        try:
            matched = compile_pattern(pattern).search(result) is not None
        except PatternError as e:
            return failure_result(e)
        if matched:
            logger.info("pattern %r matches %r", pattern, result)
            return CheckResult(State.CRIT, result, result)
    return CheckResult(State.OK, result, result)


def failure_result(error: MKCheckError) -> CheckResult:
    return CheckResult(State.CRIT, str(error))


def timeout_message(host: str, timeout: int) -> str:
    return f"ERROR connection {host} (timeout after {timeout}s)"


def timeout_result(error: DeadlineExceeded) -> CheckResult:
    """
    >>> timeout_result(DeadlineExceeded(timeout_message("db1", 15))).output()
    'SQL UNKNOWN: ERROR connection db1 (timeout after 15s)'
    """
    return CheckResult(State.UNKNOWN, str(error))
