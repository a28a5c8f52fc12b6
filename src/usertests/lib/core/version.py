# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Version information for the usertests CLI (``usertests --version``)."""

import json
from importlib import metadata
from typing import Any


def get_version_info() -> tuple[str, str | None]:
    """Return ``(version, revision)``.

    The version comes from the installed distribution metadata. The revision
    is only known for VCS installs (``pip install git+https://...``), where
    pip records PEP 610 metadata in ``direct_url.json``; it is ``None``
    otherwise.
    """
    try:
        from usertests import __version__

        version = __version__
    except (ImportError, AttributeError):
        version = "unknown"

    return version, _get_pep610_revision()


def _get_pep610_revision(dist_name: str = "usertests") -> str | None:
    """Return VCS revision from PEP 610 metadata, if available."""
    try:
        dist = metadata.distribution(dist_name)
        direct_url = dist.read_text("direct_url.json")
    except (metadata.PackageNotFoundError, OSError, UnicodeDecodeError):
        return None

    if not direct_url:
        return None

    try:
        data = json.loads(direct_url)
    except json.JSONDecodeError:
        return None

    vcs_info = data.get("vcs_info")
    if not isinstance(vcs_info, dict):
        return None

    def validate_and_strip(value: Any) -> str | None:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped:
                return stripped
        return None

    if result := validate_and_strip(vcs_info.get("requested_revision")):
        return result

    if result := validate_and_strip(vcs_info.get("commit_id")):
        return result

    return None


def format_version_string(version: str, revision: str | None) -> str:
    """Format version and revision into a display string.

    Returns:
        ``"0.3.1"`` or ``"0.3.1 [feature-branch]"``
    """
    if revision:
        return f"{version} [{revision}]"
    return version
