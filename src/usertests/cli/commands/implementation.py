# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Implementation attempt commands: list, get."""

from ..registry import CommandGroup, ParsedInvocation, Subcommand, positional
from . import COMMON_OPTIONS, api_path, call_api, show
from .project import PROJECT_ID


def cmd_list(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "GET", api_path("projects", inv["project_id"], "implementations")))


def cmd_get(inv: ParsedInvocation) -> None:
    path = api_path("projects", inv["project_id"], "implementations", inv["implementation_id"])
    show(inv, call_api(inv, "GET", path))


GROUP = CommandGroup(
    "implementation",
    "list/get implementation attempts",
    subcommands=(
        Subcommand(
            "list",
            "List implementation attempts of a project",
            cmd_list,
            arguments=(PROJECT_ID, *COMMON_OPTIONS),
            examples=("implementation list proj_123",),
        ),
        Subcommand(
            "get",
            "Show one implementation attempt",
            cmd_get,
            arguments=(
                PROJECT_ID,
                positional("implementation_id", "<implementationId>", "implementation identifier"),
                *COMMON_OPTIONS,
            ),
            examples=("implementation get proj_123 impl_456",),
        ),
    ),
)
