#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import threading
import time

import pytest

from check_mssql.utils.exceptions import DeadlineExceeded, QueryError
from check_mssql.utils.timeout import Deadline


def test_result_before_deadline() -> None:
    deadline = Deadline(5, message="too slow")
    assert deadline.run(lambda: "done") == "done"
    assert not deadline.expired


def test_exception_before_deadline() -> None:
    def _fail() -> str:
        raise QueryError("query error: boom")

    with pytest.raises(QueryError, match="boom"):
        Deadline(5, message="too slow").run(_fail)


def test_deadline_wins() -> None:
    release = threading.Event()
    deadline = Deadline(0.1, message="too slow")
    try:
        started = time.monotonic()
        with pytest.raises(DeadlineExceeded, match="too slow"):
            deadline.run(release.wait)
        assert time.monotonic() - started < 2
        assert deadline.expired
    finally:
        release.set()


def test_zero_budget_does_not_wait() -> None:
    release = threading.Event()
    try:
        with pytest.raises(DeadlineExceeded):
            Deadline(0, message="no time").run(release.wait)
    finally:
        release.set()
