# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Generic HTTP passthrough: ``usertests api <METHOD> <PATH>``."""

from ...lib.errors import HttpError, fail
from ...lib.http import ApiRequest, extract_error_details, request_raw
from ...lib.output import print_output
from ..args import environment, parse_header_pairs, parse_json_or_file
from ..registry import CommandGroup, ParsedInvocation, Subcommand, flag, option, positional
from . import ENV_OPTIONS, JSON_FLAG

ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


def cmd_api(inv: ParsedInvocation) -> None:
    """Send an arbitrary request; the bearer token is attached when one is stored."""
    method = inv["method"].upper()
    if method not in ALLOWED_METHODS:
        fail(f'Unsupported METHOD "{method}". Allowed: {", ".join(ALLOWED_METHODS)}')

    body = parse_json_or_file(inv["data"], "--data") if inv.get("data") else None
    response = request_raw(
        ApiRequest(
            env=environment(inv),
            method=method,
            path=inv["path"],
            body=body,
            headers=parse_header_pairs(inv.get("header", [])),
            auth_mode="none" if inv.get("no_auth") else "optional",
            project_key=inv.get("key"),
        )
    )

    if inv.get("raw"):
        if response.text:
            print(response.text)
        if not response.ok:
            raise HttpError(response.status, extract_error_details(response.json, response.text))
        return

    if not response.ok:
        raise HttpError(response.status, extract_error_details(response.json, response.text))

    if response.json is not None:
        print_output(response.json, as_json=bool(inv.get("json")))
    elif response.text:
        print(response.text)


COMMAND = Subcommand(
    "api",
    "Send an HTTP request to the backend API",
    cmd_api,
    arguments=(
        positional("method", "<METHOD>", ", ".join(ALLOWED_METHODS)),
        positional("path", "<PATH>", "request path, e.g. /api/projects"),
        option("data", "<json|@file>", "request JSON body"),
        option("header", "<key:value>", "extra request header", repeatable=True),
        option("key", "<projectKey>", "send X-Project-Key (SDK endpoints)"),
        flag("no-auth", "do not attach the bearer token"),
        flag("raw", "print the raw response body"),
        *ENV_OPTIONS,
        JSON_FLAG,
    ),
    examples=(
        "api GET /api/projects --json",
        "api POST /api/projects --data '{\"name\":\"Demo\"}'",
        "api POST /api/sdk/interview/ses_123/start --key pk_live_xxx --raw",
    ),
)

GROUP = CommandGroup("api", "generic HTTP passthrough command", command=COMMAND)
