# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Debug log for the CLI.

One line per event, prefixed with the area that wrote it:

- ``dispatch:`` the resolved command, unknown commands and the error that
  ended a run (with a traceback for unexpected failures)
- ``http:`` method and URL of each backend request, then its status
- ``auth:`` / ``oauth callback:`` credential storage and the login callback

The log never contains tokens or request bodies.
"""

import time
from pathlib import Path

LOG_FILENAME = "usertests.log"


def log_path() -> Path:
    from ..core.paths import state_root

    return state_root() / LOG_FILENAME


def _log_debug(message: str) -> None:
    """Append a timestamped line to :func:`log_path`.

    IO errors are ignored; logging must not change the outcome of a command.
    """
    try:
        path = log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"[{timestamp}] {message}\n")
    except Exception:
        pass
