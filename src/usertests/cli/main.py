#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""``usertests`` entry point: resolve, parse, dispatch, report.

Resolution order for the first token:

1. nothing, ``help``, ``--help``, ``-h`` -> root help
2. ``--version``
3. a command group (``project``, ``api``, ...)
4. a legacy alias (``login`` -> ``auth login``)

Groups win over aliases. Every failure is reported on stderr as a single
``Error: ...`` line and mapped to an exit code; nothing propagates past
:func:`run`.
"""

import sys
import traceback

import requests

from ..lib._util.ansi import red, supports_color
from ..lib._util.logging_utils import _log_debug
from ..lib.core.version import format_version_string, get_version_info
from ..lib.errors import CliError
from .args import HELP_TOKENS, parse_invocation, wants_help
from .commands import api, auth, implementation, project, screener, session, signal, task
from .help import PROG, render_group_help, render_root_help, render_subcommand_help
from .registry import CommandRegistry

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

REGISTRY = CommandRegistry(
    [
        auth.GROUP,
        project.GROUP,
        session.GROUP,
        signal.GROUP,
        task.GROUP,
        screener.GROUP,
        implementation.GROUP,
        api.GROUP,
    ],
    aliases=auth.ALIASES,
)

ROOT_EXAMPLES = (
    "auth login --env stage",
    'project create --name "Demo"',
    'session send ses_123 --key pk_live_xxx --message "Hello"',
    "api GET /api/projects --json",
)


def _error(message: str) -> None:
    print(f"{red('Error:', supports_color(sys.stderr))} {message}", file=sys.stderr)


def _print(text: str) -> None:
    print(text, end="")


def _dispatch(registry: CommandRegistry, tokens: list[str]) -> int:
    if not tokens or tokens[0] in HELP_TOKENS:
        _print(render_root_help(registry, ROOT_EXAMPLES))
        return EXIT_OK

    if tokens[0] == "--version":
        print(f"{PROG} {format_version_string(*get_version_info())}")
        return EXIT_OK

    first, rest = tokens[0], tokens[1:]
    group = registry.resolve_group(first)
    if group is None:
        target = registry.resolve_alias(first)
        if target is None:
            _log_debug(f"dispatch: unknown command {first!r}")
            _error(f"Unknown command: {first}")
            print(f'Run "{PROG} help" to list the available commands.', file=sys.stderr)
            return EXIT_FAILURE
        group, subcommand = target
    else:
        if not rest or rest[0] in HELP_TOKENS:
            _print(render_group_help(registry, group))
            return EXIT_OK
        if group.command is not None:
            subcommand = group.command
        else:
            subcommand = registry.resolve_subcommand(group, rest[0])
            if subcommand is None:
                _log_debug(f"dispatch: unknown {group.name} command {rest[0]!r}")
                _error(f"Unknown {group.name} command: {rest[0]}")
                print(f'Run "{PROG} {group.name} --help" to list its commands.', file=sys.stderr)
                return EXIT_FAILURE
            rest = rest[1:]

    if wants_help(rest):
        _print(render_subcommand_help(registry, group, subcommand))
        return EXIT_OK

    invocation = parse_invocation(group, subcommand, rest)
    _log_debug(f"dispatch: {group.name} {subcommand.name}")
    result = subcommand.handler(invocation)
    return int(result or EXIT_OK)


def run(argv: list[str] | None = None, registry: CommandRegistry = REGISTRY) -> int:
    """Execute one command line (program name excluded) and return its exit code."""
    tokens = list(sys.argv[1:] if argv is None else argv)
    try:
        return _dispatch(registry, tokens)
    except KeyboardInterrupt:
        _log_debug("dispatch: interrupted")
        print(file=sys.stderr)
        return EXIT_INTERRUPTED
    except CliError as e:
        _log_debug(f"dispatch: error: {e.message}")
        _error(e.message)
        return e.exit_code
    except requests.RequestException as e:
        _log_debug(f"dispatch: network error: {e}")
        _error(f"Request failed: {e}")
        return EXIT_FAILURE
    except Exception as e:
        _log_debug(f"dispatch: unexpected failure\n{traceback.format_exc()}")
        _error(f"unexpected failure: {e}")
        return EXIT_FAILURE


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
