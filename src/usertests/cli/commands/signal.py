# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Signal commands: list, link."""

from ..registry import CommandGroup, ParsedInvocation, Subcommand, option, positional
from . import COMMON_OPTIONS, api_path, call_api, show, with_query
from .project import PROJECT_ID


def cmd_list(inv: ParsedInvocation) -> None:
    path = with_query(
        api_path("projects", inv["project_id"], "signals"),
        {"type": inv.get("type"), "session_id": inv.get("session"), "task_id": inv.get("task")},
    )
    show(inv, call_api(inv, "GET", path))


def cmd_link(inv: ParsedInvocation) -> None:
    path = api_path("projects", inv["project_id"], "signals", inv["signal_id"], "link")
    show(inv, call_api(inv, "POST", path, {"task_id": inv["task_id"]}))


GROUP = CommandGroup(
    "signal",
    "list/link signals",
    subcommands=(
        Subcommand(
            "list",
            "List signals extracted from sessions",
            cmd_list,
            arguments=(
                PROJECT_ID,
                option("type", "<type>", "filter by signal type"),
                option("session", "<sessionId>", "filter by session"),
                option("task", "<taskId>", "filter by task"),
                *COMMON_OPTIONS,
            ),
            examples=("signal list proj_123 --type friction", "signal list proj_123 --session ses_123"),
        ),
        Subcommand(
            "link",
            "Link a signal to a task",
            cmd_link,
            arguments=(
                PROJECT_ID,
                positional("signal_id", "<signalId>", "signal identifier"),
                positional("task_id", "<taskId>", "task identifier"),
                *COMMON_OPTIONS,
            ),
            examples=("signal link proj_123 sig_123 task_456",),
        ),
    ),
)
