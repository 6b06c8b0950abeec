#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from dataclasses import dataclass, field

DEFAULT_PORT = 1433
DEFAULT_TIMEOUT = 15


@dataclass(frozen=True)
class CheckSettings:
    """Everything one run of the check needs, resolved before the engine starts"""

    host: str
    username: str
    password: str = field(repr=False)
    query: str
    port: int = DEFAULT_PORT
    database: str | None = None
    pattern: str | None = None
    timeout: int = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class ConnectionDescriptor:
    server: str
    port: int
    user: str
    password: str = field(repr=False)
    database: str | None
    timeout: int

    @classmethod
    def from_settings(cls, settings: CheckSettings) -> "ConnectionDescriptor":
        return cls(
            server=settings.host,
            port=settings.port,
            user=settings.username,
            password=settings.password,
            database=settings.database or None,
            timeout=settings.timeout,
        )

    @property
    def driver_timeout(self) -> int:
        """Timeout handed to the driver, where 0 would mean 'wait forever'

        >>> ConnectionDescriptor("db", 1433, "u", "p", None, 0).driver_timeout
        1
        """
        return max(self.timeout, 1)
