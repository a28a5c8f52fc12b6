# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Platform-aware path resolution for config and state directories."""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "usertests"


def config_root() -> Path:
    """
    Base directory for user configuration (credentials.yml).

    Priority:
      1. USERTESTS_CONFIG_DIR
      2. platformdirs user config dir (~/.config/usertests on Linux)
    """
    env = os.getenv("USERTESTS_CONFIG_DIR")
    if env:
        return Path(env).expanduser()
    return Path(user_config_dir(APP_NAME))


def state_root() -> Path:
    """
    Writable state (debug log).

    Priority:
      1. USERTESTS_STATE_DIR
      2. platformdirs user data dir (${XDG_DATA_HOME:-~/.local/share}/usertests)
    """
    env = os.getenv("USERTESTS_STATE_DIR")
    if env:
        return Path(env).expanduser()
    return Path(user_data_dir(APP_NAME))
