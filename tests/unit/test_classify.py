#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import pytest

from check_mssql.classify import (
    CheckResult,
    classify,
    failure_result,
    timeout_message,
    timeout_result,
)
from check_mssql.utils.exceptions import DeadlineExceeded, EmptyResultError, QueryError
from check_mssql.utils.statename import State
from check_mssql.values import FormattedResult


def test_no_pattern_is_ok() -> None:
    result = classify(FormattedResult(";2024-01-01;42"), None)
    assert result == CheckResult(State.OK, ";2024-01-01;42", ";2024-01-01;42")
    assert result.output() == "SQL OK: ;2024-01-01;42|;2024-01-01;42"


def test_empty_pattern_is_no_pattern() -> None:
    assert classify(FormattedResult("anything"), "").state is State.OK


@pytest.mark.parametrize(
    "pattern",
    [
        "FAIL",
        r"^\d+;FAIL",
        # spans columns: matched against the joined text
        r"1;FAIL",
    ],
)
def test_matching_pattern_is_critical(pattern: str) -> None:
    result = classify(FormattedResult("1;FAIL;x"), pattern)
    assert result.state is State.CRIT
    assert result.output() == "SQL CRITICAL: 1;FAIL;x|1;FAIL;x"


def test_not_matching_pattern_is_ok() -> None:
    result = classify(FormattedResult("1;RUNNING"), "FAIL")
    assert result.output() == "SQL OK: 1;RUNNING|1;RUNNING"


@pytest.mark.parametrize("pattern", ["(unbalanced", "[a-", "*"])
def test_invalid_pattern_is_critical(pattern: str) -> None:
    result = classify(FormattedResult("1"), pattern)
    assert result.state is State.CRIT
    assert result.perfdata is None
    assert result.output().startswith("SQL CRITICAL: Invalid regex: ")


def test_failure_result_has_no_perfdata() -> None:
    assert failure_result(QueryError("query error: boom")).output() == (
        "SQL CRITICAL: query error: boom"
    )
    assert failure_result(EmptyResultError()).output() == (
        "SQL CRITICAL: query returned no rows"
    )


def test_timeout_result() -> None:
    result = timeout_result(DeadlineExceeded(timeout_message("sql.example.com", 3)))
    assert result.state is State.UNKNOWN
    assert result.output() == "SQL UNKNOWN: ERROR connection sql.example.com (timeout after 3s)"


def test_warning_is_named_but_not_produced() -> None:
    assert CheckResult(State.WARN, "x").output() == "SQL WARNING: x"
