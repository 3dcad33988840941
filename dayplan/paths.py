from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "DAYPLAN_HOME"
SUBSCRIPTIONS_FILE = "calendars.yaml"


def project_root() -> Path:
    """
    Repository/project root directory.
    Contains dayplan/, config/, tests/.
    """
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """
    User-writable home for dayplan.
    Override with DAYPLAN_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".dayplan").resolve()


def config_dir() -> Path:
    d = app_home() / "config"
    d.mkdir(parents=True, exist_ok=True)
    return d


def subscriptions_path() -> Path:
    """Location of the external calendar subscription list."""
    return config_dir() / SUBSCRIPTIONS_FILE
