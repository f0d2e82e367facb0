"""
portal/config.py

Runtime settings, read from the environment once per process.

PORTAL_DB_PATH     Path of the JSON store file (default ``data/portal_db.json``).
PORTAL_SEED_DEMO   ``0``/``false``/``no`` disables demo accounts on an empty store.
PORTAL_LOG_LEVEL   Root logging level for the Streamlit app (default ``INFO``).
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data") / "portal_db.json"

_FALSEY = {"0", "false", "no", "off", ""}


class PortalSettings(BaseModel):
    db_path: Path = DEFAULT_DB_PATH
    seed_demo: bool = True
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{v}'")
        return level

    @classmethod
    def from_env(cls) -> "PortalSettings":
        values: dict = {}
        if os.environ.get("PORTAL_DB_PATH"):
            values["db_path"] = Path(os.environ["PORTAL_DB_PATH"])
        if "PORTAL_SEED_DEMO" in os.environ:
            values["seed_demo"] = os.environ["PORTAL_SEED_DEMO"].strip().lower() not in _FALSEY
        if os.environ.get("PORTAL_LOG_LEVEL"):
            values["log_level"] = os.environ["PORTAL_LOG_LEVEL"]
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> PortalSettings:
    settings = PortalSettings.from_env()
    logger.debug("Portal settings: %s", settings)
    return settings
