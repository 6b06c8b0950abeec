#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# pylint: disable=redefined-outer-name

from collections.abc import Iterator

import pytest

from tests.unit.mocks_and_helpers import FakeServer

from check_mssql.settings import CheckSettings
from check_mssql.utils.timeout import Budget
from check_mssql.utils.log import clear_console_logging


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    clear_console_logging()


@pytest.fixture
def server() -> Iterator[FakeServer]:
    fake = FakeServer()
    yield fake
    # Never leave an abandoned worker waiting behind
    if fake.block is not None:
        fake.block.set()


@pytest.fixture
def budget(server: FakeServer) -> Budget:
    return Budget(5, clock=server.clock)


@pytest.fixture
def settings() -> CheckSettings:
    return CheckSettings(
        host="db01",
        username="nagios",
        password="s3cret",
        query="SELECT GETDATE()",
        timeout=5,
    )
