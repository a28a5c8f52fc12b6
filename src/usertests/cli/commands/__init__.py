# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""CLI command modules.

Each module exposes ``GROUP``, the :class:`CommandGroup` it contributes to
the registry, and the handler functions its subcommands point at. Handlers
take a :class:`ParsedInvocation`, print their result and signal failure by
raising :class:`CliError`.
"""

from typing import Any
from urllib.parse import urlencode

from ...lib.http import ApiRequest, quote_segment, request_json
from ...lib.output import print_output
from ..args import environment
from ..registry import ParsedInvocation, flag, option

ENV_OPTIONS = (
    option("env", "<env>", "stage | production | local"),
    flag("local", "shortcut for --env local"),
)
JSON_FLAG = flag("json", "print the raw JSON response")

COMMON_OPTIONS = (*ENV_OPTIONS, JSON_FLAG)


def api_path(*segments: Any) -> str:
    """``api_path("projects", pid, "tasks")`` -> ``/api/projects/<pid>/tasks`` (segments quoted)."""
    return "/api/" + "/".join(quote_segment(s) for s in segments)


def call_api(inv: ParsedInvocation, method: str, path: str, body: Any = None, **kwargs: Any) -> Any:
    """Send one request to the environment selected on the command line."""
    return request_json(ApiRequest(env=environment(inv), method=method, path=path, body=body, **kwargs))


def show(inv: ParsedInvocation, data: Any) -> None:
    print_output(data, as_json=bool(inv.get("json")))


def collect_fields(inv: ParsedInvocation, fields: dict[str, str]) -> dict[str, Any]:
    """Map non-empty option values (``{option_name: body_key}``) into a request body."""
    body: dict[str, Any] = {}
    for name, key in fields.items():
        value = inv.get(name)
        if value not in (None, ""):
            body[key] = value
    return body


def with_query(path: str, params: dict[str, Any]) -> str:
    """Append the non-empty *params* to *path* as a query string."""
    query = urlencode({k: v for k, v in params.items() if v not in (None, "")})
    return f"{path}?{query}" if query else path
