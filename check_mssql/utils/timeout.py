#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import math
import queue
import threading
import time
from collections.abc import Callable
from typing import Final, Generic, TypeVar

from check_mssql.utils.exceptions import DeadlineExceeded
from check_mssql.utils.log import logger

__all__ = ["Budget", "DeadlineExceeded", "Deadline"]

_T = TypeVar("_T")


class _Outcome(Generic[_T]):
    __slots__ = ("value", "error")

    def __init__(self, value: _T | None = None, error: BaseException | None = None) -> None:
        self.value = value
        self.error = error


class Deadline:
    """Race a function against a wall clock deadline

    The function runs in a single daemon thread. Whatever comes first, its
    result, its exception or the end of the time budget, is what `run` reports.
    A worker that loses the race is not killed: it is abandoned and goes away
    with the process. Blocking calls inside the worker have to carry their own
    timeouts to finish in time.
    """

    def __init__(self, timeout: float, *, message: str) -> None:
        self.timeout: Final = timeout
        self.message: Final = message
        self._expired = False

    @property
    def expired(self) -> bool:
        return self._expired

    def run(self, function: Callable[[], _T]) -> _T:
        completion: queue.Queue[_Outcome[_T]] = queue.Queue(maxsize=1)

        def _worker() -> None:
            try:
                completion.put(_Outcome(value=function()))
            except Exception as e:
                completion.put(_Outcome(error=e))

        self._expired = False
        threading.Thread(target=_worker, name="check-worker", daemon=True).start()

        try:
            outcome = completion.get(timeout=max(self.timeout, 0))
        except queue.Empty:
            self._expired = True
            logger.warning("deadline of %ss exceeded, abandoning worker", self.timeout)
            raise DeadlineExceeded(self.message) from None

        if outcome.error is not None:
            raise outcome.error
        return outcome.value  # type: ignore[return-value]


class Budget:
    """Time left for a sequence of blocking calls sharing one deadline

    >>> now = [100.0]
    >>> budget = Budget(10, clock=lambda: now[0])
    >>> now[0] = 106.5
    >>> budget.remaining(), budget.driver_seconds()
    (3.5, 4)
    >>> now[0] = 111.0
    >>> budget.remaining(), budget.driver_seconds()
    (0.0, 0)
    """

    def __init__(self, seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock: Final = clock
        self.expires: Final = clock() + seconds

    def remaining(self) -> float:
        return max(self.expires - self._clock(), 0.0)

    def driver_seconds(self) -> int:
        """Whole seconds for a driver timeout, 0 if the budget is used up"""
        return math.ceil(self.remaining())
