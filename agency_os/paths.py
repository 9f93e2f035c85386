from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "AGENCY_OS_HOME"
APP_ENV_DB = "AGENCY_OS_DB"


def project_root() -> Path:
    """
    Repository/project root directory.
    Contains agency_os/, api/, cli/, tests/.
    """
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """
    User-writable home for Agency OS.
    Override with AGENCY_OS_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".agency_os").resolve()


def config_dir() -> Path:
    d = app_home() / "config"
    d.mkdir(parents=True, exist_ok=True)
    return d


def data_dir() -> Path:
    d = app_home() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    """
    Canonical snapshot DB path.

    Resolution order:
    1. AGENCY_OS_DB env var (explicit override)
    2. ~/.agency_os/data/agency_os.db (default)
    """
    if os.environ.get(APP_ENV_DB):
        return Path(os.environ[APP_ENV_DB]).expanduser().resolve()
    return data_dir() / "agency_os.db"
