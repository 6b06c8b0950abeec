#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_mssql - Runs a query against an MS-SQL server and returns the first row"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from pydantic import BaseModel, NonNegativeInt

from check_mssql import __version__
from check_mssql.connection import connect_pymssql, Connector
from check_mssql.engine import run_check
from check_mssql.settings import CheckSettings, DEFAULT_PORT, DEFAULT_TIMEOUT
from check_mssql.utils import password_store
from check_mssql.utils.exceptions import MKConfigError
from check_mssql.utils.log import logger, setup_console_logging
from check_mssql.utils.statename import State

_DESCRIPTION = """\
Runs a query against an MS-SQL server and returns the first row.
Returns CRITICAL if the regex matches or errors occur. The row is passed to the
performance data in semicolon-delimited format.
A simple SQL statement like "SELECT GETDATE()" verifies server responsiveness."""

_VERSION = f"""\
check_mssql
Version: {__version__}
Nagios check for MS SQL Server"""


class Args(BaseModel):
    hostname: None | str
    port: int
    user: None | str
    password: None | str
    pass_reference: None | str
    credfile: None | str
    database: None | str
    timeout: NonNegativeInt
    query: None | str
    regex: None | str
    verbose: int
    debug: bool

    def resolve_secret(self) -> None | str:
        if self.password is not None:
            return self.password
        if self.pass_reference is not None:
            secret_id, sep, file = self.pass_reference.partition(":")
            if not sep:
                raise MKConfigError(f"invalid password reference: '{self.pass_reference}'")
            return password_store.lookup(Path(file), secret_id)
        return None

    def to_settings(self) -> CheckSettings:
        if self.credfile:
            username, password = password_store.load_credentials(Path(self.credfile))
        else:
            username, password = self.user, self.resolve_secret()

        if not (self.hostname and username and password and self.query):
            raise MKConfigError(
                "Missing required arguments (server, username, password, query)"
            )

        return CheckSettings(
            host=self.hostname,
            port=self.port,
            username=username,
            password=password,
            database=self.database or None,
            query=self.query,
            pattern=self.regex or None,
            timeout=self.timeout,
        )


class ArgParser(argparse.ArgumentParser):
    # Exit code 2 would be read as CRITICAL by the monitoring core
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        output_check_result(f"Error: {message}")
        sys.exit(int(State.UNKNOWN))


def parse_arguments(argv: Sequence[str]) -> Args:
    parser = ArgParser(
        prog="check_mssql",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=_VERSION, help="Print version information."
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (use caution, -vv may expose connection details)",
    )
    parser.add_argument("--debug", action="store_true", help="Raise python exceptions.")
    parser.add_argument("-H", "--hostname", default=None, help="SQL Server to connect to")
    parser.add_argument(
        "-P", "--port", type=int, default=DEFAULT_PORT, help=f"Port (Default: {DEFAULT_PORT})"
    )
    parser.add_argument("-u", "--user", default=None, help="Username to connect with")

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-p", "--pass", dest="password", default=None, help="Password to connect with"
    )
    group.add_argument(
        "--pass-reference",
        metavar="ID:FILE",
        default=None,
        help="Password store reference to the password to connect with",
    )

    parser.add_argument(
        "-f",
        "--credfile",
        metavar="FILE",
        default=None,
        help="Credentials file (format: username=<user>\\npassword=<pass>), overrides -u and -p",
    )
    parser.add_argument("-d", "--database", default=None, help="Database name")
    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        metavar="TIMEOUT",
        default=DEFAULT_TIMEOUT,
        help=f"Seconds before the check gives up (Default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument("-q", "--query", default=None, help="Query to execute")
    parser.add_argument(
        "-r",
        "--regex",
        default=None,
        help="Regex searched in the semicolon-joined first row, a match is CRITICAL",
    )

    namespace = parser.parse_args(argv)
    if namespace.timeout < 0:
        parser.error("argument -t/--timeout: must not be negative")
    return Args.model_validate(vars(namespace))


def output_check_result(s: str) -> None:
    sys.stdout.write("%s\n" % s)


def main(argv: Sequence[str] | None = None, connector: Connector = connect_pymssql) -> int:
    args = parse_arguments(sys.argv[1:] if argv is None else argv)
    setup_console_logging(args.verbose)

    try:
        settings = args.to_settings()
    except MKConfigError as e:
        if args.debug:
            raise
        output_check_result(f"Error: {e}")
        return int(State.UNKNOWN)

    logger.debug("checking %r", settings)
    result = run_check(settings, connector, debug=args.debug)
    output_check_result(result.output())
    return int(result.state)


if __name__ == "__main__":
    sys.exit(main())
