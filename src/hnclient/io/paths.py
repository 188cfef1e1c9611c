"""XDG application directories.

// [LAW:one-source-of-truth] Config/cache/state locations are derived here only.
"""

from __future__ import annotations

import os
from pathlib import Path

from hnclient.errors import StartupError

APP_NAME = "hnclient"


def _xdg_home(env_var: str, fallback: str) -> Path:
    return Path(os.environ.get(env_var) or os.path.expanduser(fallback))


def config_dir() -> Path:
    return _xdg_home("XDG_CONFIG_HOME", "~/.config") / APP_NAME


def cache_dir() -> Path:
    return _xdg_home("XDG_CACHE_HOME", "~/.cache") / APP_NAME


def state_dir() -> Path:
    return _xdg_home("XDG_STATE_HOME", "~/.local/state") / APP_NAME


def config_path() -> Path:
    return config_dir() / "config.json"


def cache_path() -> Path:
    return cache_dir() / "cache.json"


def ensure_app_dirs() -> None:
    """Create config and cache directories; failure is fatal at startup."""
    for directory in (config_dir(), cache_dir()):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StartupError(f"cannot create {directory}: {exc}") from exc
