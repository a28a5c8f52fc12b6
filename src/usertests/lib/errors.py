# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Exception types surfaced to the CLI error boundary."""

from typing import NoReturn


class CliError(Exception):
    """A user-facing failure that maps to a printed message and an exit code."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class HttpError(CliError):
    """Non-success HTTP status returned by the backend."""

    def __init__(self, status: int, details: str) -> None:
        super().__init__(f"HTTP {status}: {details}")
        self.status = status
        self.details = details


def fail(message: str, exit_code: int = 1) -> NoReturn:
    """Raise a :class:`CliError` with *message*."""
    raise CliError(message, exit_code)
