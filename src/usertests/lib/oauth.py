# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""OAuth 2.0 authorization-code flow with PKCE for ``usertests auth login``.

The flow:

1. fetch the OIDC discovery document from the backend,
2. open the browser on the authorization endpoint with an S256 code challenge,
3. receive the redirect on a one-shot local HTTP server,
4. exchange the code (plus verifier) at ``/api/oauth/token``.
"""

from __future__ import annotations

import base64
import hashlib
import html
import secrets
import time
import webbrowser
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse

import requests

from ._util.logging_utils import _log_debug
from .errors import CliError, fail

DEFAULT_CLIENT_ID = "lrsr-cli"
DEFAULT_REDIRECT_PORT = 8765
AUTH_SCOPES = "openid profile email"
CALLBACK_TIMEOUT_SECONDS = 5 * 60


@dataclass
class TokenResponse:
    access_token: str
    expires_in: int
    token_type: str = "Bearer"
    scope: str | None = None
    user: Any = None


def generate_code_verifier() -> str:
    return _base64url(secrets.token_bytes(32))


def generate_code_challenge(code_verifier: str) -> str:
    return _base64url(hashlib.sha256(code_verifier.encode("ascii")).digest())


def generate_state() -> str:
    return _base64url(secrets.token_bytes(16))


def _base64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def fetch_oidc_configuration(base_url: str, verify: bool = True, timeout: float = 30.0) -> dict[str, Any]:
    resp = requests.get(
        f"{base_url}/.well-known/openid-configuration",
        headers={"accept": "application/json"},
        timeout=timeout,
        verify=verify,
    )
    if not resp.ok:
        fail(f"Failed to load OIDC configuration ({resp.status_code})")
    return resp.json()


def build_authorization_url(
    authorization_endpoint: str,
    *,
    client_id: str,
    redirect_uri: str,
    code_challenge: str,
    state: str,
) -> str:
    params = {
        "client_id": client_id,
        "response_type": "code",
        "scope": AUTH_SCOPES,
        "redirect_uri": redirect_uri,
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
        "state": state,
        "access_type": "offline",
    }
    separator = "&" if "?" in authorization_endpoint else "?"
    return f"{authorization_endpoint}{separator}{urlencode(params)}"


def exchange_code_for_token(
    *,
    base_url: str,
    code: str,
    code_verifier: str,
    redirect_uri: str,
    client_id: str,
    verify: bool = True,
    timeout: float = 30.0,
) -> TokenResponse:
    resp = requests.post(
        f"{base_url}/api/oauth/token",
        json={
            "grant_type": "authorization_code",
            "code": code,
            "code_verifier": code_verifier,
            "redirect_uri": redirect_uri,
            "client_id": client_id,
        },
        headers={"accept": "application/json"},
        timeout=timeout,
        verify=verify,
    )
    if not resp.ok:
        fail(f"Token exchange failed ({resp.status_code}): {resp.text}")

    data = resp.json()
    try:
        return TokenResponse(
            access_token=str(data["access_token"]),
            expires_in=int(data["expires_in"]),
            token_type=str(data.get("token_type", "Bearer")),
            scope=data.get("scope"),
            user=data.get("user"),
        )
    except (KeyError, TypeError, ValueError):
        fail("Token exchange returned an unexpected response")


def open_browser(url: str) -> bool:
    """Open *url* in the default browser; return False if none could be launched."""
    try:
        return webbrowser.open(url)
    except webbrowser.Error:
        return False


# ---------------------------------------------------------------------------
# Local callback server
# ---------------------------------------------------------------------------


class _CallbackServer(HTTPServer):
    expected_state: str
    code: str | None = None
    error: str | None = None


class _CallbackHandler(BaseHTTPRequestHandler):
    server: _CallbackServer

    def do_GET(self) -> None:  # noqa: N802 - http.server naming
        url = urlparse(self.path)
        if url.path != "/callback":
            self._respond(404, _error_page("not_found", "Page not found"))
            return

        query = parse_qs(url.query)
        code = query.get("code", [None])[0]
        state = query.get("state", [None])[0]
        error = query.get("error", [None])[0]
        description = query.get("error_description", [None])[0]

        if error:
            self._respond(400, _error_page(error, description))
            self.server.error = f"OAuth error: {error}" + (f" - {description}" if description else "")
            return
        if not code:
            self._respond(400, _error_page("invalid_request", "Missing authorization code"))
            self.server.error = "Missing authorization code"
            return
        if state != self.server.expected_state:
            self._respond(400, _error_page("invalid_request", "State parameter mismatch"))
            self.server.error = "State mismatch"
            return

        self._respond(200, _SUCCESS_PAGE)
        self.server.code = code

    def _respond(self, status: int, body: str) -> None:
        payload = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args: Any) -> None:
        _log_debug(f"oauth callback: {format % args}")


def wait_for_authorization_code(
    port: int,
    expected_state: str,
    timeout: float = CALLBACK_TIMEOUT_SECONDS,
) -> str:
    """Serve ``http://127.0.0.1:<port>/callback`` until the redirect arrives."""
    try:
        server = _CallbackServer(("127.0.0.1", port), _CallbackHandler)
    except OSError as e:
        raise CliError(f"Failed to start local callback server: {e}") from e

    server.expected_state = expected_state
    server.timeout = 1.0
    deadline = time.monotonic() + timeout
    try:
        while server.code is None and server.error is None:
            if time.monotonic() >= deadline:
                fail("Login timed out waiting for authorization response")
            server.handle_request()
    finally:
        server.server_close()

    if server.error is not None:
        fail(server.error)
    return server.code


_SUCCESS_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Login Successful - UserTests CLI</title></head>
<body style="font-family: sans-serif; text-align: center; padding-top: 4rem;">
  <h1>Login Successful!</h1>
  <p>You can close this window and return to the terminal.</p>
</body>
</html>"""


def _error_page(error: str, description: str | None = None) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Login Failed - UserTests CLI</title></head>
<body style="font-family: sans-serif; text-align: center; padding-top: 4rem;">
  <h1>Login Failed</h1>
  <p>{html.escape(description or "Authorization was denied or failed.")}</p>
  <p><code>Error: {html.escape(error)}</code></p>
  <p>Please return to the terminal and try again.</p>
</body>
</html>"""
