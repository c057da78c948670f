# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "WorkspaceAnalytics"
COMPANY_NAME = "WorkspaceSuite"


def _platform_base() -> Path:
    if sys.platform.startswith("win"):
        return Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def user_data_dir() -> Path:
    """
    Returns the per-user data directory holding the database, logs and support events.

    WA_DATA_DIR overrides the location. Otherwise, e.g.:

    Windows:
        C:\\Users\\<User>\\AppData\\Roaming\\WorkspaceSuite\\WorkspaceAnalytics

    macOS:
        ~/Library/Application Support/WorkspaceSuite/WorkspaceAnalytics

    Linux:
        ~/.local/share/WorkspaceSuite/WorkspaceAnalytics
    """
    override = (os.getenv("WA_DATA_DIR") or "").strip()
    try:
        path = Path(override) if override else _platform_base() / COMPANY_NAME / APP_NAME
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        # Last-resort fallback: use home directory
        fallback = Path.home() / f".{APP_NAME}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_db_path() -> Path:
    """
    The full path to the SQLite database file under the user data dir.
    """
    return user_data_dir() / "workspace_analytics.db"


def logs_dir() -> Path:
    path = user_data_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path
