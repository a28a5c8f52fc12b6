# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Authentication commands: login, logout, whoami."""

import json
import sys
import time
from datetime import UTC, datetime

from ...lib._util.ansi import supports_color, yellow
from ...lib._util.logging_utils import _log_debug
from ...lib.core.config import http_timeout, normalize_environment, resolve_base_url, verify_tls
from ...lib.credentials import (
    StoredCredentials,
    StoredToken,
    load_credentials,
    remove_credentials,
    save_credentials,
)
from ...lib.errors import fail
from ...lib.http import ApiRequest, request_raw
from ...lib.oauth import (
    DEFAULT_CLIENT_ID,
    DEFAULT_REDIRECT_PORT,
    build_authorization_url,
    exchange_code_for_token,
    fetch_oidc_configuration,
    generate_code_challenge,
    generate_code_verifier,
    generate_state,
    open_browser,
    wait_for_authorization_code,
)
from ..args import environment
from ..registry import Alias, CommandGroup, ParsedInvocation, Subcommand, flag
from . import ENV_OPTIONS, JSON_FLAG


def cmd_login(inv: ParsedInvocation) -> None:
    """Run the browser-based PKCE login and store the issued token."""
    env = environment(inv)
    base_url = resolve_base_url(env)
    verify = verify_tls(env)
    timeout = http_timeout()

    if not verify:
        print(
            yellow("Warning: TLS certificate verification disabled (local dev mode)", supports_color(sys.stderr)),
            file=sys.stderr,
        )

    print(f'Starting login for environment "{env}" using {base_url}')
    oidc = fetch_oidc_configuration(base_url, verify=verify, timeout=timeout)
    endpoint = oidc.get("authorization_endpoint")
    if not isinstance(endpoint, str) or not endpoint:
        fail("OIDC configuration missing authorization_endpoint")

    state = generate_state()
    redirect_uri = f"http://127.0.0.1:{DEFAULT_REDIRECT_PORT}/callback"
    code_verifier = generate_code_verifier()
    auth_url = build_authorization_url(
        endpoint,
        client_id=DEFAULT_CLIENT_ID,
        redirect_uri=redirect_uri,
        code_challenge=generate_code_challenge(code_verifier),
        state=state,
    )

    print("Opening browser for authentication...")
    if not open_browser(auth_url):
        print(
            "Unable to open browser automatically. Please copy the URL below into your browser:",
            file=sys.stderr,
        )
        print(auth_url)

    code = wait_for_authorization_code(DEFAULT_REDIRECT_PORT, state)

    print("Received authorization code. Exchanging for access token...")
    token = exchange_code_for_token(
        base_url=base_url,
        code=code,
        code_verifier=code_verifier,
        redirect_uri=redirect_uri,
        client_id=DEFAULT_CLIENT_ID,
        verify=verify,
        timeout=timeout,
    )

    now = time.time()
    credentials = StoredCredentials(
        environment=env,
        base_url=base_url,
        client_id=DEFAULT_CLIENT_ID,
        token=StoredToken(
            access_token=token.access_token,
            expires_at=now + token.expires_in,
            issued_at=now,
            scope=token.scope,
        ),
        user=token.user,
        updated_at=datetime.now(UTC).isoformat(),
    )
    path = save_credentials(credentials)
    _log_debug(f"auth: stored credentials for {env}")
    print(f"Login successful. Credentials saved to {path}")


def cmd_logout(inv: ParsedInvocation) -> None:
    """Remove credentials for one environment, or all when none is given."""
    env = None
    if inv.get("local"):
        env = "local"
    elif inv.get("env"):
        env = normalize_environment(inv["env"])

    try:
        remove_credentials(env)
    except FileNotFoundError:
        print("No stored credentials were found.")
        return

    if env:
        print(f'Removed stored credentials for environment "{env}".')
    else:
        print("Removed all stored credentials.")


def cmd_whoami(inv: ParsedInvocation) -> None:
    env = environment(inv)
    credentials = load_credentials(env)
    if credentials is None:
        fail(f'Not authenticated for environment "{env}". Run "usertests auth login --env {env}" first.')
    if credentials.token.is_expired():
        fail(f'Stored token for environment "{env}" is expired. Run "usertests auth login --env {env}" again.')

    verified = None if inv.get("no_verify") else _verify_token(env)

    if inv.get("json"):
        print(json.dumps({**credentials.to_dict(), "verified": verified}, indent=2))
        return

    user = credentials.user if isinstance(credentials.user, dict) else {}
    name = user.get("name") if isinstance(user.get("name"), str) else "unknown"
    email = user.get("email") if isinstance(user.get("email"), str) else "unknown"
    expires = datetime.fromtimestamp(credentials.token.expires_at, UTC).isoformat()

    print(f"environment: {env}")
    print(f"base_url: {credentials.base_url}")
    print(f"name: {name}")
    print(f"email: {email}")
    print(f"token_expires_at: {expires}")
    if verified is not None:
        print(f"verified: {'yes' if verified else 'no'}")


def _verify_token(env: str) -> bool:
    response = request_raw(ApiRequest(env=env, method="GET", path="/api/projects"))
    if not response.ok:
        message = response.text.strip() or "Token validation failed"
        fail(f"Unable to verify token with server ({response.status}): {message}")
    return True


LOGIN = Subcommand(
    "login",
    "Authenticate in the browser and store a bearer token",
    cmd_login,
    arguments=ENV_OPTIONS,
    examples=("auth login --env stage",),
)

LOGOUT = Subcommand(
    "logout",
    "Remove stored credentials (all environments if --env is omitted)",
    cmd_logout,
    arguments=ENV_OPTIONS,
    examples=("auth logout --env production",),
)

WHOAMI = Subcommand(
    "whoami",
    "Show the authenticated user for an environment",
    cmd_whoami,
    arguments=(
        *ENV_OPTIONS,
        JSON_FLAG,
        flag("no-verify", "skip server-side token verification"),
    ),
    examples=("auth whoami --env stage",),
)

GROUP = CommandGroup("auth", "login/logout/whoami", subcommands=(LOGIN, LOGOUT, WHOAMI))

ALIASES = (
    Alias("login", "auth", "login"),
    Alias("logout", "auth", "logout"),
)
