#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import logging
import sys
from typing import IO

# Just for reference, the predefined logging levels:
#
# syslog/CMC    Python         added to Python
# --------------------------------------------
# crit   2      CRITICAL 50
# err    3      ERROR    40
# warn   4      WARNING  30                 <= default level of the check
# info   6      INFO     20
#                              VERBOSE  15
# debug  7      DEBUG    10
#
# stdout belongs to the monitoring core (exactly one result line), so all
# log output of the check goes to stderr.

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("check_mssql")


def get_formatter(
    format_str: str = "%(asctime)s [%(levelno)s] [%(name)s] %(message)s",
) -> logging.Formatter:
    """Returns a new message formater instance that uses the standard
    log format by default. You can also set another format if you like."""
    return logging.Formatter(format_str)


def clear_console_logging() -> None:
    logger.handlers[:] = []
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.WARNING)


# Set default logging handler to avoid "No handler found" warnings.
clear_console_logging()


def setup_logging_handler(stream: IO[str], formatter: logging.Formatter | None = None) -> None:
    """Write all log messages of the package logger to the given stream"""
    if formatter is None:
        formatter = get_formatter()

    handler = logging.StreamHandler(stream=stream)
    handler.setFormatter(formatter)

    del logger.handlers[:]  # Remove all previously existing handlers
    logger.addHandler(handler)


def setup_console_logging(verbosity: int) -> None:
    setup_logging_handler(sys.stderr, get_formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.setLevel(verbosity_to_log_level(verbosity))


def verbosity_to_log_level(verbosity: int) -> int:
    """Values for "verbosity":

      0: enables WARNING and above
      1: enables VERBOSE and above
      2: enables DEBUG and above (ALL messages, may expose connection details)

    >>> verbosity_to_log_level(0) == logging.WARNING
    True
    >>> verbosity_to_log_level(5) == logging.DEBUG
    True
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return VERBOSE
    return logging.DEBUG
