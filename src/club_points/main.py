from __future__ import annotations

import importlib
import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .auth.controller import register as register_auth
from .container import Container, build_container
from .core.constants import DEFAULT_LOG_LEVEL
from .core.enums import StorageBackend
from .core.logging import setup_logging
from .database.bootstrap import apply_schema, list_tables
from .events.controller import register as register_events
from .exchange.controller import register as register_exchange
from .members.controller import register as register_members

logger = logging.getLogger(__name__)

_SETTING_NAMES = (
    "SECRET_KEY",
    "DEBUG",
    "TESTING",
    "LOG_LEVEL",
    "STORAGE_BACKEND",
    "DATA_FILE",
    "DB_CONFIG",
    "AUTO_INIT_DB",
    "ADMIN_CREDENTIALS",
)


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> dict:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {name: getattr(module, name) for name in _SETTING_NAMES if hasattr(module, name)}
    settings["SETTINGS_MODULE"] = settings_module
    settings.update(overrides or {})
    return settings


def create_app(
    settings_override: Optional[Mapping[str, Any]] = None,
    *,
    container: Optional[Container] = None,
) -> Flask:
    load_dotenv(override=False)
    settings = load_settings(settings_override)
    setup_logging(str(settings.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL))

    app = Flask(__name__)
    app.secret_key = settings.get("SECRET_KEY")
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))
    app.json.ensure_ascii = False

    logger.info("settings=%s storage=%s", settings["SETTINGS_MODULE"], settings.get("STORAGE_BACKEND"))

    backend = str(settings.get("STORAGE_BACKEND") or "").lower()
    if container is None and backend == StorageBackend.MYSQL.value and settings.get("AUTO_INIT_DB"):
        db_config = dict(settings.get("DB_CONFIG") or {})
        apply_schema(db_config)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = container or build_container(settings=settings)
    app.extensions["club_points"] = container

    register_auth(app, container)
    register_members(app, container)
    register_events(app, container)
    register_exchange(app, container)

    return app
