# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Interview session commands.

``start``, ``send`` and ``end`` drive an interview through the SDK endpoints
the way an embedded widget would: no bearer token, the project key is sent
in ``X-Project-Key`` instead.
"""

from ..registry import CommandGroup, ParsedInvocation, Subcommand, option, positional
from . import COMMON_OPTIONS, api_path, call_api, collect_fields, show, with_query
from .project import PROJECT_ID

SESSION_ID = positional("session_id", "<sessionId>", "session identifier")
PROJECT_KEY = option("key", "<projectKey>", "project public or secret key", required=True)


def cmd_list(inv: ParsedInvocation) -> None:
    path = with_query(api_path("projects", inv["project_id"], "sessions"), {"status": inv.get("status")})
    show(inv, call_api(inv, "GET", path))


def cmd_create(inv: ParsedInvocation) -> None:
    body = collect_fields(
        inv,
        {"name": "participant_name", "email": "participant_email", "mode": "interview_mode"},
    )
    show(inv, call_api(inv, "POST", api_path("projects", inv["project_id"], "sessions"), body))


def _sdk_interview(inv: ParsedInvocation, action: str, body: dict | None = None) -> None:
    data = call_api(
        inv,
        "POST",
        api_path("sdk", "interview", inv["session_id"], action),
        body,
        auth_mode="none",
        project_key=inv["key"],
    )
    show(inv, data)


def cmd_start(inv: ParsedInvocation) -> None:
    _sdk_interview(inv, "start")


def cmd_send(inv: ParsedInvocation) -> None:
    _sdk_interview(inv, "message", {"content": inv["message"]})


def cmd_end(inv: ParsedInvocation) -> None:
    _sdk_interview(inv, "end")


def cmd_get(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "GET", api_path("projects", inv["project_id"], "sessions", inv["session_id"])))


def cmd_reprocess(inv: ParsedInvocation) -> None:
    path = api_path("projects", inv["project_id"], "sessions", inv["session_id"], "reprocess")
    show(inv, call_api(inv, "POST", path))


GROUP = CommandGroup(
    "session",
    "list/create/start/send/end/get/reprocess sessions",
    subcommands=(
        Subcommand(
            "list",
            "List sessions of a project",
            cmd_list,
            arguments=(PROJECT_ID, option("status", "<status>", "filter by status"), *COMMON_OPTIONS),
            examples=("session list proj_123 --status active",),
        ),
        Subcommand(
            "create",
            "Create an interview session",
            cmd_create,
            arguments=(
                PROJECT_ID,
                option("name", "<participant>", "participant name"),
                option("email", "<email>", "participant email"),
                option("mode", "<voice|chat>", "interview mode"),
                *COMMON_OPTIONS,
            ),
            examples=("session create proj_123 --name Alice",),
        ),
        Subcommand(
            "start",
            "Start an interview (SDK endpoint, project key auth)",
            cmd_start,
            arguments=(SESSION_ID, PROJECT_KEY, *COMMON_OPTIONS),
            examples=("session start ses_123 --key pk_live_xxx",),
        ),
        Subcommand(
            "send",
            "Send a participant message (SDK endpoint, project key auth)",
            cmd_send,
            arguments=(
                SESSION_ID,
                PROJECT_KEY,
                option("message", "<text>", "message content", required=True),
                *COMMON_OPTIONS,
            ),
            examples=('session send ses_123 --key pk_live_xxx --message "I can\'t find checkout"',),
        ),
        Subcommand(
            "end",
            "End an interview (SDK endpoint, project key auth)",
            cmd_end,
            arguments=(SESSION_ID, PROJECT_KEY, *COMMON_OPTIONS),
        ),
        Subcommand(
            "get",
            "Show one session",
            cmd_get,
            arguments=(PROJECT_ID, SESSION_ID, *COMMON_OPTIONS),
        ),
        Subcommand(
            "reprocess",
            "Re-run signal extraction for a session",
            cmd_reprocess,
            arguments=(PROJECT_ID, SESSION_ID, *COMMON_OPTIONS),
            examples=("session reprocess proj_123 ses_123",),
        ),
    ),
)
