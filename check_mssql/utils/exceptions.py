#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""User-defined exceptions of the SQL Server check."""

__all__ = [
    "ConnectError",
    "DeadlineExceeded",
    "EmptyResultError",
    "ExtractionError",
    "MKCheckError",
    "MKConfigError",
    "MKException",
    "MKTimeout",
    "PatternError",
    "QueryError",
]


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class MKException(Exception):
    pass


class MKConfigError(MKException):
    """The check was called with unusable settings (results in UNKNOWN)."""


# Everything below MKCheckError is turned into a CRITICAL result by the pipeline.
class MKCheckError(MKException):
    pass


class ConnectError(MKCheckError):
    """Opening the connection or the reachability probe failed."""


class QueryError(MKCheckError):
    pass


class EmptyResultError(MKCheckError):
    def __init__(self) -> None:
        super().__init__("query returned no rows")


class ExtractionError(MKCheckError):
    """Reading the column metadata or the row values failed."""


class PatternError(MKCheckError):
    pass


class MKTimeout(MKException):
    pass


class DeadlineExceeded(MKTimeout):
    pass
