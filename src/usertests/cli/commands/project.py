# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Project commands: list, create, get, update."""

from ...lib.errors import fail
from ..registry import CommandGroup, ParsedInvocation, Subcommand, option, positional
from . import COMMON_OPTIONS, api_path, call_api, collect_fields, show

PROJECT_ID = positional("project_id", "<projectId>", "project identifier")

_UPDATE_FIELDS = {
    "name": "name",
    "description": "description",
    "repo": "github_repo_url",
    "branch": "github_default_branch",
}


def cmd_list(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "GET", api_path("projects")))


def cmd_create(inv: ParsedInvocation) -> None:
    body = {"name": inv["name"]}
    body.update(collect_fields(inv, {"description": "description", "repo": "github_repo_url"}))
    show(inv, call_api(inv, "POST", api_path("projects"), body))


def cmd_get(inv: ParsedInvocation) -> None:
    show(inv, call_api(inv, "GET", api_path("projects", inv["project_id"])))


def cmd_update(inv: ParsedInvocation) -> None:
    body = collect_fields(inv, _UPDATE_FIELDS)
    if not body:
        fail("No fields to update. Provide at least one of: --name, --description, --repo, --branch")
    show(inv, call_api(inv, "PATCH", api_path("projects", inv["project_id"]), body))


GROUP = CommandGroup(
    "project",
    "list/create/get/update projects",
    subcommands=(
        Subcommand(
            "list",
            "List projects you can access",
            cmd_list,
            arguments=COMMON_OPTIONS,
            examples=("project list --env stage",),
        ),
        Subcommand(
            "create",
            "Create a project",
            cmd_create,
            arguments=(
                option("name", "<name>", "project name", required=True),
                option("description", "<text>", "project description"),
                option("repo", "<url>", "GitHub repository URL"),
                *COMMON_OPTIONS,
            ),
            examples=('project create --name "Demo" --description "Smoke test"',),
        ),
        Subcommand(
            "get",
            "Show one project",
            cmd_get,
            arguments=(PROJECT_ID, *COMMON_OPTIONS),
        ),
        Subcommand(
            "update",
            "Update project fields (at least one option required)",
            cmd_update,
            arguments=(
                PROJECT_ID,
                option("name", "<name>", "new project name"),
                option("description", "<text>", "new description"),
                option("repo", "<url>", "GitHub repository URL"),
                option("branch", "<name>", "default branch"),
                *COMMON_OPTIONS,
            ),
            examples=("project update proj_123 --repo https://github.com/acme/app --branch main",),
        ),
    ),
)
