# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import os
from pathlib import Path

from ..errors import fail


def ensure_dir_writable(path: Path, label: str) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        fail(f"{label} directory is not writable: {path} ({e})")
    if not path.is_dir():
        fail(f"{label} path is not a directory: {path}")
    if not os.access(path, os.W_OK | os.X_OK):
        fail(
            f"{label} directory is not writable: {path}\n"
            f"Fix permissions for the user running usertests (uid={os.getuid()})."
        )


def write_private_text(path: Path, text: str) -> None:
    """Write *text* to *path* readable only by the owner (mode 0600)."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    os.chmod(path, 0o600)
