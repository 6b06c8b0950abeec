#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Access to secrets that are not passed on the command line

Two sources are supported:

 * a password store file with one ``<ident>:<secret>`` entry per line, looked up
   with :func:`lookup` (the ``--pass-reference ID:FILE`` option of the check)
 * a credentials file in the format ``username=<user>`` / ``password=<pass>``,
   read with :func:`load_credentials` (the ``--credfile`` option)
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import NamedTuple

from check_mssql.utils.exceptions import MKConfigError


class Credentials(NamedTuple):
    username: str
    password: str


def load(pw_file: Path) -> Mapping[str, str]:
    try:
        content = pw_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MKConfigError(f"failed to read password store: {e}") from e

    passwords = {}
    for line in content.splitlines():
        if not line.strip():
            continue
        ident, password = line.split(":", 1)
        passwords[ident] = password
    return passwords


def lookup(pw_file: Path, password_id: str) -> str:
    """Look up the password with ID in the password file"""
    try:
        return load(pw_file)[password_id]
    except KeyError:
        raise MKConfigError(f"password store: unknown id '{password_id}'") from None
    except ValueError as e:
        raise MKConfigError(f"password store: invalid format: {e}") from e


def parse_credentials(lines: Iterable[str]) -> Credentials:
    """
    >>> parse_credentials(["# site db", "username = nagios", "password=s3cr=t", "trash"])
    Credentials(username='nagios', password='s3cr=t')
    """
    creds: dict[str, str] = {}
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        creds[key.strip()] = value.strip()

    if "username" not in creds:
        raise MKConfigError("credentials file missing username")
    if "password" not in creds:
        raise MKConfigError("credentials file missing password")
    return Credentials(creds["username"], creds["password"])


def load_credentials(cred_file: Path) -> Credentials:
    try:
        content = cred_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MKConfigError(f"failed to read credentials file: {e}") from e
    return parse_credentials(content.splitlines())
