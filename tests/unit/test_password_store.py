#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from pathlib import Path

import pytest

from check_mssql.utils.exceptions import MKConfigError
from check_mssql.utils.password_store import Credentials, load_credentials, lookup


def test_load_credentials(tmp_path: Path) -> None:
    cred_file = tmp_path / "creds"
    cred_file.write_text("# monitoring user\n\nusername=nagios\npassword = p@ss=word \n")
    assert load_credentials(cred_file) == Credentials("nagios", "p@ss=word")


@pytest.mark.parametrize(
    "content, message",
    [
        ("password=x\n", "credentials file missing username"),
        ("username=x\n", "credentials file missing password"),
    ],
)
def test_incomplete_credentials(tmp_path: Path, content: str, message: str) -> None:
    cred_file = tmp_path / "creds"
    cred_file.write_text(content)
    with pytest.raises(MKConfigError, match=message):
        load_credentials(cred_file)


def test_missing_credentials_file(tmp_path: Path) -> None:
    with pytest.raises(MKConfigError, match="failed to read credentials file"):
        load_credentials(tmp_path / "nope")


def test_lookup(tmp_path: Path) -> None:
    pw_file = tmp_path / "stored_passwords"
    pw_file.write_text("mssql:s3:cr3t\nother:x\n")
    assert lookup(pw_file, "mssql") == "s3:cr3t"
    with pytest.raises(MKConfigError, match="unknown id 'missing'"):
        lookup(pw_file, "missing")


def test_credentials_file_not_utf8(tmp_path: Path) -> None:
    cred_file = tmp_path / "creds"
    cred_file.write_bytes(b"username=mon\npassword=p\xe4ss\n")
    with pytest.raises(MKConfigError, match="failed to read credentials file"):
        load_credentials(cred_file)


def test_password_store_not_utf8(tmp_path: Path) -> None:
    pw_file = tmp_path / "stored_passwords"
    pw_file.write_bytes(b"mssql:p\xe4ss\n")
    with pytest.raises(MKConfigError, match="failed to read password store"):
        lookup(pw_file, "mssql")
