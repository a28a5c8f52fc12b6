# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""HTTP access to the UserTests backend API.

``request_raw`` performs one request and returns an :class:`ApiResponse`
whatever the status; ``request_json`` raises :class:`HttpError` for
non-success statuses and returns the decoded body. Network failures surface
as ``requests.RequestException`` and are reported by the CLI error boundary.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal
from urllib.parse import quote

import requests
import urllib3

from ._util.logging_utils import _log_debug
from .core.config import http_timeout, resolve_base_url, verify_tls
from .credentials import load_credentials
from .errors import HttpError, fail

AuthMode = Literal["required", "optional", "none"]


@dataclass
class ApiRequest:
    env: str
    method: str
    path: str
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    auth_mode: AuthMode = "required"
    project_key: str | None = None


@dataclass
class ApiResponse:
    status: int
    ok: bool
    headers: dict[str, str]
    text: str
    json: Any = None


def request_json(request: ApiRequest) -> Any:
    """Perform *request* and return its JSON body (or text when not JSON)."""
    response = request_raw(request)
    if not response.ok:
        raise HttpError(response.status, extract_error_details(response.json, response.text))
    if response.json is not None:
        return response.json
    return response.text


def request_raw(request: ApiRequest) -> ApiResponse:
    method = request.method.upper()
    headers: dict[str, str] = {"accept": "application/json", **request.headers}

    if request.project_key:
        headers["X-Project-Key"] = request.project_key

    token = resolve_token(request.env, request.auth_mode)
    if token:
        headers["authorization"] = f"Bearer {token}"

    data = None
    if request.body is not None:
        data = json.dumps(request.body)
        if not any(key.lower() == "content-type" for key in headers):
            headers["content-type"] = "application/json"

    path = request.path if request.path.startswith("/") else f"/{request.path}"
    url = f"{resolve_base_url(request.env)}{path}"
    verify = verify_tls(request.env)
    if not verify:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    _log_debug(f"http: {method} {url}")
    resp = requests.request(
        method,
        url,
        headers=headers,
        data=data,
        timeout=http_timeout(),
        verify=verify,
    )
    _log_debug(f"http: {method} {url} -> {resp.status_code}")

    text = resp.text
    content_type = resp.headers.get("content-type", "")
    parsed = _safe_parse_json(text) if "application/json" in content_type and text else None

    return ApiResponse(
        status=resp.status_code,
        ok=resp.ok,
        headers=dict(resp.headers),
        text=text,
        json=parsed,
    )


def resolve_token(env: str, auth_mode: AuthMode) -> str | None:
    """Return the stored bearer token for *env* according to *auth_mode*."""
    if auth_mode == "none":
        return None

    credentials = load_credentials(env)
    if credentials is None:
        if auth_mode == "required":
            fail(
                f'Not authenticated for environment "{env}". '
                f'Run "usertests auth login --env {env}" first.'
            )
        return None

    if credentials.token.is_expired():
        if auth_mode == "required":
            fail(
                f'Stored token for environment "{env}" is expired. '
                f'Run "usertests auth login --env {env}" again.'
            )
        return None

    return credentials.token.access_token


def extract_error_details(payload: Any, text: str) -> str:
    """Pick the most useful error message from a failed response."""
    if isinstance(payload, dict):
        for key in ("error", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return text.strip() or "Request failed"


def _safe_parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def quote_segment(value: Any) -> str:
    """URL-encode one path segment (``/`` included)."""
    return quote(str(value), safe="")
