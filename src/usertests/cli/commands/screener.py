# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Screener commands.

A screener is a participant qualification survey. Authoring commands use
the bearer token; ``respond`` submits answers through the public SDK
endpoint with a project key, like a participant's browser would.
"""

import json
from typing import Any
from urllib.parse import urlencode

from ...lib.core.config import web_base_url
from ...lib.errors import fail
from ...lib.http import quote_segment
from ..args import environment, parse_int, parse_json_or_file
from ..registry import CommandGroup, ParsedInvocation, Subcommand, flag, option, positional
from . import COMMON_OPTIONS, api_path, call_api, collect_fields, show
from .project import PROJECT_ID
from .session import PROJECT_KEY

SCREENER_ID = positional("screener_id", "<screenerId>", "screener identifier")

_CREATE_TEXT_FIELDS = (
    "description",
    "welcome-message",
    "consent-text",
    "brand-color",
    "incentive-type",
    "incentive-description",
)
_UPDATE_TEXT_FIELDS = (
    "title",
    "description",
    "status",
    "welcome-message",
    "thank-you-message",
    "disqualified-message",
    "brand-color",
    "consent-text",
)


def _screener_path(inv: ParsedInvocation, *rest: str) -> str:
    return api_path("projects", inv["project_id"], "screeners", inv["screener_id"], *rest)


def _text_fields(inv: ParsedInvocation, names: tuple[str, ...]) -> dict[str, Any]:
    return collect_fields(inv, {name: name.replace("-", "_") for name in names})


def _set_status(inv: ParsedInvocation, status: str) -> Any:
    return call_api(inv, "PATCH", _screener_path(inv), {"status": status})


def cmd_list(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "GET", api_path("projects", inv["project_id"], "screeners")))


def cmd_create(inv: ParsedInvocation) -> None:
    project_id = inv["project_id"]
    body: dict[str, Any] = {"title": inv["title"], **_text_fields(inv, _CREATE_TEXT_FIELDS)}
    if inv.get("max_participants"):
        body["max_participants"] = parse_int(inv["max_participants"], "--max-participants")
    if inv.get("incentive_value_cents"):
        body["incentive_value_cents"] = parse_int(inv["incentive_value_cents"], "--incentive-value-cents")
    if inv.get("questions"):
        body["questions"] = parse_json_or_file(inv["questions"], "--questions")

    data = call_api(inv, "POST", api_path("projects", project_id, "screeners"), body)
    screener = data.get("screener") if isinstance(data, dict) else None
    screener_id = screener.get("id") if isinstance(screener, dict) else None

    if inv.get("activate") and screener_id:
        call_api(inv, "PATCH", api_path("projects", project_id, "screeners", screener_id), {"status": "active"})
        screener["status"] = "active"

    show(inv, data)

    if inv.get("json") or not screener_id:
        return
    env = environment(inv)
    print()
    print("--- Next steps ---")
    print(f"Get your project public key:  usertests project get {project_id} --env {env} --json")
    public_url = f"{web_base_url(env)}/u/screener/{quote_segment(screener_id)}?key=<PUBLIC_KEY>"
    print(f"Public URL:                   {public_url}")
    if not inv.get("activate"):
        print(f"Activate screener:            usertests screener activate {project_id} {screener_id} --env {env}")


def cmd_get(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "GET", _screener_path(inv)))


def cmd_update(inv: ParsedInvocation) -> None:
    body = _text_fields(inv, _UPDATE_TEXT_FIELDS)
    if inv.get("max_participants"):
        body["max_participants"] = parse_int(inv["max_participants"], "--max-participants")
    if not body:
        fail("No update fields provided. Use --title, --description, --status, --welcome-message, etc.")
    show(inv, call_api(inv, "PATCH", _screener_path(inv), body))


def cmd_activate(inv: ParsedInvocation) -> None:
    show(inv, _set_status(inv, "active"))


def cmd_deactivate(inv: ParsedInvocation) -> None:
    show(inv, _set_status(inv, "inactive"))


def cmd_add_question(inv: ParsedInvocation) -> None:
    body: dict[str, Any] = {
        "question_text": inv["text"],
        "question_type": inv.get("type") or "text",
        "required": bool(inv.get("required")),
    }
    if inv.get("options"):
        body["options"] = parse_json_or_file(inv["options"], "--options")
    if inv.get("rules"):
        body["qualification_rules"] = parse_json_or_file(inv["rules"], "--rules")
    if inv.get("min"):
        body["min_value"] = parse_int(inv["min"], "--min")
    if inv.get("max"):
        body["max_value"] = parse_int(inv["max"], "--max")
    show(inv, call_api(inv, "POST", _screener_path(inv, "questions"), body))


def cmd_url(inv: ParsedInvocation) -> None:
    """Print the participant-facing screener URL (needs the project's public key)."""
    data = call_api(inv, "GET", api_path("projects", inv["project_id"]))
    project = data.get("project") if isinstance(data, dict) else None
    public_key = project.get("public_key") if isinstance(project, dict) else None
    if not public_key:
        fail("Could not retrieve project public key")

    screener_id = inv["screener_id"]
    query = urlencode({"key": public_key})
    url = f"{web_base_url(environment(inv))}/u/screener/{quote_segment(screener_id)}?{query}"
    if inv.get("json"):
        print(json.dumps({"url": url, "screener_id": screener_id, "public_key": public_key}))
    else:
        print(url)


def cmd_respond(inv: ParsedInvocation) -> None:
    payload: dict[str, Any] = {
        "answers": parse_json_or_file(inv["answers"], "--answers"),
        "consent_given": True,
        "consent_recording": True,
        "consent_analytics": True,
        "consent_followup": True,
    }
    payload.update(collect_fields(inv, {"name": "participant_name", "email": "participant_email"}))
    data = call_api(
        inv,
        "POST",
        api_path("sdk", "screener", inv["screener_id"], "respond"),
        payload,
        auth_mode="none",
        project_key=inv["key"],
    )
    show(inv, data)


GROUP = CommandGroup(
    "screener",
    "list/create/get/update/activate/deactivate/add-question/url/respond screeners",
    subcommands=(
        Subcommand(
            "list",
            "List screeners of a project",
            cmd_list,
            arguments=(PROJECT_ID, *COMMON_OPTIONS),
        ),
        Subcommand(
            "create",
            "Create a screener",
            cmd_create,
            arguments=(
                PROJECT_ID,
                option("title", "<title>", "screener title", required=True),
                option("description", "<text>", "description shown to participants"),
                option("welcome-message", "<text>", "welcome message at the top of the screener"),
                option("consent-text", "<text>", "consent checkbox text"),
                option("brand-color", "<hex>", "brand color (e.g. #4F46E5)"),
                option("max-participants", "<n>", "maximum qualified participants"),
                option("incentive-type", "<type>", "e.g. gift_card, product_credit"),
                option("incentive-description", "<text>", 'e.g. "$20 gift card"'),
                option("incentive-value-cents", "<n>", "incentive value in cents"),
                option("questions", "<json|@file>", "questions array (JSON or @filename)"),
                flag("activate", "set status to active immediately"),
                *COMMON_OPTIONS,
            ),
            examples=('screener create proj_123 --title "Power User Study" --activate --questions @screener.json',),
        ),
        Subcommand(
            "get",
            "Show one screener",
            cmd_get,
            arguments=(PROJECT_ID, SCREENER_ID, *COMMON_OPTIONS),
        ),
        Subcommand(
            "update",
            "Update screener fields (at least one option required)",
            cmd_update,
            arguments=(
                PROJECT_ID,
                SCREENER_ID,
                option("title", "<title>", "screener title"),
                option("description", "<text>", "description shown to participants"),
                option("status", "<status>", "active | inactive"),
                option("welcome-message", "<text>", "welcome message"),
                option("thank-you-message", "<text>", "message shown after qualifying"),
                option("disqualified-message", "<text>", "message shown after disqualification"),
                option("brand-color", "<hex>", "brand color"),
                option("consent-text", "<text>", "consent checkbox text"),
                option("max-participants", "<n>", "maximum qualified participants"),
                *COMMON_OPTIONS,
            ),
        ),
        Subcommand(
            "activate",
            "Set a screener's status to active",
            cmd_activate,
            arguments=(PROJECT_ID, SCREENER_ID, *COMMON_OPTIONS),
            examples=("screener activate proj_123 scr_456",),
        ),
        Subcommand(
            "deactivate",
            "Set a screener's status to inactive",
            cmd_deactivate,
            arguments=(PROJECT_ID, SCREENER_ID, *COMMON_OPTIONS),
        ),
        Subcommand(
            "add-question",
            "Append a question to a screener",
            cmd_add_question,
            arguments=(
                PROJECT_ID,
                SCREENER_ID,
                option("text", "<text>", "question text", required=True),
                option("type", "<type>", "question type (default: text)"),
                option("options", "<json>", "answer options for choice questions"),
                option("rules", "<json>", "qualification rules"),
                option("min", "<n>", "minimum value for number questions"),
                option("max", "<n>", "maximum value for number questions"),
                flag("required", "answer is required"),
                *COMMON_OPTIONS,
            ),
            examples=(
                "screener add-question proj_123 scr_456 --text \"Role?\" --type single_choice "
                "--options '[\"Engineer\",\"PM\",\"Designer\"]' --required",
            ),
        ),
        Subcommand(
            "url",
            "Print the public screener URL",
            cmd_url,
            arguments=(PROJECT_ID, SCREENER_ID, *COMMON_OPTIONS),
            examples=("screener url proj_123 scr_456",),
        ),
        Subcommand(
            "respond",
            "Submit screener answers (SDK endpoint, project key auth)",
            cmd_respond,
            arguments=(
                SCREENER_ID,
                PROJECT_KEY,
                option("answers", "<json|@file>", "answers object", required=True),
                option("name", "<name>", "participant name"),
                option("email", "<email>", "participant email"),
                *COMMON_OPTIONS,
            ),
            examples=("screener respond scr_123 --key ut_pub_xxx --answers '{\"q1\":\"Daily\"}'",),
        ),
    ),
)
