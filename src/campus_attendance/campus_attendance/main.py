from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .catalog.controller import register as register_catalog
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_CACHE_TTL_HOURS, DEFAULT_GEOFENCE_RADIUS_METERS, DEFAULT_LOCAL_TIMEZONE
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_principals, list_tables
from .notes.controller import register as register_notes
from .principals.controller import register as register_principals

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_principals(db_config)
        logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory. Pass ``container`` to run over pre-built collaborators."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            local_store_path=getattr(settings, "LOCAL_STORE_PATH"),
            device_fallback_path=getattr(settings, "DEVICE_FALLBACK_PATH"),
            notes_root=getattr(settings, "NOTES_STORAGE_ROOT"),
            tz_name=getattr(settings, "LOCAL_TIMEZONE", DEFAULT_LOCAL_TIMEZONE),
            geofence_radius_m=float(getattr(settings, "GEOFENCE_RADIUS_METERS", DEFAULT_GEOFENCE_RADIUS_METERS)),
            cache_ttl_hours=float(getattr(settings, "CATALOG_CACHE_TTL_HOURS", DEFAULT_CACHE_TTL_HOURS)),
        )

    register_error_handlers(app)
    register_principals(app, container)
    register_catalog(app, container)
    register_attendance(app, container)
    register_notes(app, container)

    return app
