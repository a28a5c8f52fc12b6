# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Per-environment credential store.

Credentials live in ``config_root()/credentials.yml``::

    configs:
      stage:
        environment: stage
        base_url: https://usertests-stage.krasnoperov.me
        client_id: lrsr-cli
        token: {access_token: ..., expires_at: 1767225600.0, issued_at: ..., scope: ...}
        user: {name: ..., email: ...}
        updated_at: '2026-01-01T00:00:00+00:00'

Timestamps are epoch seconds.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

from ._util.fs import ensure_dir_writable, write_private_text
from .core.paths import config_root
from .errors import fail

CREDENTIALS_FILE_NAME = "credentials.yml"


@dataclass
class StoredToken:
    access_token: str
    expires_at: float
    issued_at: float
    scope: str | None = None

    def is_expired(self, now: float | None = None) -> bool:
        return self.expires_at <= (time.time() if now is None else now)


@dataclass
class StoredCredentials:
    environment: str
    base_url: str
    client_id: str
    token: StoredToken
    user: Any
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoredCredentials:
        token = data.get("token") or {}
        return cls(
            environment=str(data["environment"]),
            base_url=str(data.get("base_url", "")),
            client_id=str(data.get("client_id", "")),
            token=StoredToken(
                access_token=str(token["access_token"]),
                expires_at=float(token["expires_at"]),
                issued_at=float(token.get("issued_at", 0)),
                scope=token.get("scope"),
            ),
            user=data.get("user"),
            updated_at=str(data.get("updated_at", "")),
        )


def credentials_path() -> Path:
    return config_root() / CREDENTIALS_FILE_NAME


def _load_all() -> dict[str, dict[str, Any]] | None:
    """Return the ``configs`` mapping, or ``None`` if no credentials file exists."""
    path = credentials_path()
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        fail(f"Credentials file {path} is not valid YAML: {e}")
    configs = data.get("configs") if isinstance(data, dict) else None
    if not isinstance(configs, dict):
        return {}
    return configs


def _save_all(configs: dict[str, dict[str, Any]]) -> None:
    path = credentials_path()
    ensure_dir_writable(path.parent, "Config")
    write_private_text(path, yaml.safe_dump({"configs": configs}, sort_keys=False))


def save_credentials(credentials: StoredCredentials) -> Path:
    """Store *credentials* under their environment, keeping other environments."""
    configs = _load_all() or {}
    configs[credentials.environment] = credentials.to_dict()
    _save_all(configs)
    return credentials_path()


def load_credentials(environment: str) -> StoredCredentials | None:
    configs = _load_all()
    if not configs:
        return None
    entry = configs.get(environment)
    if not isinstance(entry, dict):
        return None
    try:
        return StoredCredentials.from_dict(entry)
    except (KeyError, TypeError, ValueError):
        fail(
            f'Stored credentials for environment "{environment}" are malformed. '
            f'Run "usertests auth login --env {environment}" again.'
        )


def remove_credentials(environment: str | None = None) -> None:
    """Remove credentials for *environment*, or all of them when omitted.

    Raises:
        FileNotFoundError: no credentials file exists.
    """
    path = credentials_path()
    if environment is None:
        path.unlink()
        return

    configs = _load_all()
    if configs is None:
        raise FileNotFoundError(path)
    configs.pop(environment, None)
    if configs:
        _save_all(configs)
    else:
        path.unlink()
