# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Task commands: list, get, update-status, spec, implement, measure."""

from ..registry import CommandGroup, ParsedInvocation, Subcommand, flag, option, positional
from . import COMMON_OPTIONS, api_path, call_api, show, with_query
from .project import PROJECT_ID

TASK_ID = positional("task_id", "<taskId>", "task identifier")


def _task_path(inv: ParsedInvocation, *rest: str) -> str:
    return api_path("projects", inv["project_id"], "tasks", inv["task_id"], *rest)


def cmd_list(inv: ParsedInvocation) -> None:
    path = with_query(api_path("projects", inv["project_id"], "tasks"), {"status": inv.get("status")})
    show(inv, call_api(inv, "GET", path))


def cmd_get(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "GET", _task_path(inv)))


def cmd_update_status(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "PATCH", _task_path(inv), {"status": inv["status"]}))


def cmd_spec(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "POST", _task_path(inv, "spec")))


def cmd_implement(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "POST", _task_path(inv, "implement"), {"dry_run": bool(inv.get("dry_run"))}))


def cmd_measure(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "POST", _task_path(inv, "measure")))


GROUP = CommandGroup(
    "task",
    "list/get/update-status/spec/implement/measure tasks",
    subcommands=(
        Subcommand(
            "list",
            "List tasks of a project",
            cmd_list,
            arguments=(PROJECT_ID, option("status", "<status>", "filter by status"), *COMMON_OPTIONS),
            examples=("task list proj_123 --status open",),
        ),
        Subcommand(
            "get",
            "Show one task",
            cmd_get,
            arguments=(PROJECT_ID, TASK_ID, *COMMON_OPTIONS),
        ),
        Subcommand(
            "update-status",
            "Change a task's status",
            cmd_update_status,
            arguments=(
                PROJECT_ID,
                TASK_ID,
                positional("status", "<status>", "new status"),
                *COMMON_OPTIONS,
            ),
            examples=("task update-status proj_123 task_456 in_progress",),
        ),
        Subcommand(
            "spec",
            "Generate an implementation spec for a task",
            cmd_spec,
            arguments=(PROJECT_ID, TASK_ID, *COMMON_OPTIONS),
        ),
        Subcommand(
            "implement",
            "Start an implementation attempt for a task",
            cmd_implement,
            arguments=(
                PROJECT_ID,
                TASK_ID,
                flag("dry-run", "plan the change without opening a pull request"),
                *COMMON_OPTIONS,
            ),
            examples=("task implement proj_123 task_456 --dry-run",),
        ),
        Subcommand(
            "measure",
            "Measure the impact of a shipped task",
            cmd_measure,
            arguments=(PROJECT_ID, TASK_ID, *COMMON_OPTIONS),
            examples=("task measure proj_123 task_456",),
        ),
    ),
)
