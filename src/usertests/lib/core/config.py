# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import os
import sys
from pathlib import Path
from typing import Any

import yaml  # pip install pyyaml

from ..errors import fail

# ---------- Environments ----------

ENVIRONMENTS = ("stage", "production", "local")
DEFAULT_ENVIRONMENT = "stage"
DEFAULT_HTTP_TIMEOUT = 30.0

_BASE_URLS = {
    "production": "https://usertests.krasnoperov.me",
    "stage": "https://usertests-stage.krasnoperov.me",
    "local": "https://local.krasnoperov.me:3001",
}


# ---------- Global config ----------


def global_config_search_paths() -> list[Path]:
    """Return the ordered list of paths that will be checked for global config.

    - If USERTESTS_CONFIG_FILE is set, only that single path is considered.
    - Otherwise, check in order:
        1) ${XDG_CONFIG_HOME:-~/.config}/usertests/config.yml
        2) sys.prefix/etc/usertests/config.yml
        3) /etc/usertests/config.yml
    """
    env_file = os.environ.get("USERTESTS_CONFIG_FILE")
    if env_file:
        return [Path(env_file).expanduser().resolve()]

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    user_cfg = (Path(xdg_home) if xdg_home else Path.home() / ".config") / "usertests" / "config.yml"
    sp_cfg = Path(sys.prefix) / "etc" / "usertests" / "config.yml"
    etc_cfg = Path("/etc/usertests/config.yml")
    return [user_cfg, sp_cfg, etc_cfg]


def global_config_path() -> Path:
    """Global config file path (first existing candidate wins).

    An explicit USERTESTS_CONFIG_FILE is returned even if missing so the
    intent stays visible. If no candidate exists, the last path is returned.
    """
    candidates = global_config_search_paths()
    if len(candidates) == 1:
        return candidates[0]

    for c in candidates:
        if c.is_file():
            return c.resolve()
    return candidates[-1]


def load_global_config() -> dict[str, Any]:
    cfg_path = global_config_path()
    if not cfg_path.is_file():
        return {}
    data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        fail(f"Invalid global config {cfg_path}: expected a mapping at the top level")
    return data


def get_global_section(key: str) -> dict[str, Any]:
    """Return a top-level section from the global config, defaulting to ``{}``.

    If the value under *key* is not a dict, returns ``{}`` so callers can
    use ``.get()`` without checking.
    """
    value = load_global_config().get(key, {})
    if not isinstance(value, dict):
        return {}
    return value


# ---------- Environment resolution ----------


def default_environment() -> str:
    """Environment used when neither --env nor --local is given."""
    configured = load_global_config().get("default_environment")
    if configured:
        return normalize_environment(str(configured))
    return DEFAULT_ENVIRONMENT


def normalize_environment(value: str) -> str:
    """Lower-case *value*, map ``staging`` to ``stage`` and validate it."""
    env = value.lower()
    if env == "staging":
        return "stage"
    if env not in ENVIRONMENTS:
        fail(f'Invalid environment "{env}". Valid options: stage, production, local')
    return env


def resolve_environment(env: str | None, local: bool = False) -> str:
    """Pick the environment from the shared ``--env``/``--local`` options."""
    if local:
        return "local"
    if env is None:
        return default_environment()
    return normalize_environment(env)


def resolve_base_url(env: str) -> str:
    """API base URL for *env*; ``environments.<env>.base_url`` overrides the built-in."""
    env = normalize_environment(env)
    override = get_global_section("environments").get(env)
    if isinstance(override, dict) and override.get("base_url"):
        return str(override["base_url"]).rstrip("/")
    return _BASE_URLS[env]


def web_base_url(env: str) -> str:
    """Public web frontend for participant-facing links (screener URLs)."""
    if env == "production":
        return _BASE_URLS["production"]
    return _BASE_URLS["stage"]


def verify_tls(env: str) -> bool:
    """Local development uses a self-signed certificate."""
    return env != "local"


def http_timeout() -> float:
    """Request timeout in seconds (``http.timeout`` in the global config)."""
    value = get_global_section("http").get("timeout")
    if value is None:
        return DEFAULT_HTTP_TIMEOUT
    try:
        return float(value)
    except (TypeError, ValueError):
        fail(f"Invalid http.timeout in {global_config_path()}: {value!r}")
