#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Render the values of a result row as text

Driver values are first sorted into a closed set of kinds, and every kind has
exactly one rendering rule:

>>> format_row([None, "2024-01-01", 42])
';2024-01-01;42'
>>> format_row([b"raw", 1.5, True])
'raw;1.5;True'
"""

import decimal
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import NewType

FormattedResult = NewType("FormattedResult", str)

SEPARATOR = ";"


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Bytes:
    value: bytes


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Number:
    value: int | float | decimal.Decimal


@dataclass(frozen=True)
class Other:
    value: object


Value = Null | Bytes | Text | Number | Other


def classify_value(raw: object) -> Value:
    if raw is None:
        return Null()
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return Bytes(bytes(raw))
    if isinstance(raw, str):
        return Text(raw)
    # bool is an int subclass, but not a number as far as the output is concerned
    if isinstance(raw, (int, float, decimal.Decimal)) and not isinstance(raw, bool):
        return Number(raw)
    return Other(raw)


def render(value: Value) -> str:
    match value:
        case Null():
            return ""
        case Bytes(raw):
            return raw.decode("utf-8", errors="replace")
        case Text(text):
            return text
        case Number(number):
            return str(number)
        case Other(obj):
            return str(obj)
    raise TypeError(f"unhandled value kind: {value!r}")


def classify_row(raw_row: Iterable[object]) -> Sequence[Value]:
    return [classify_value(v) for v in raw_row]


def format_row(raw_row: Iterable[object]) -> FormattedResult:
    return FormattedResult(SEPARATOR.join(render(v) for v in classify_row(raw_row)))
