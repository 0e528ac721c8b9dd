from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request, send_from_directory
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from .attendance.controller import register as register_attendance
from .common.datetime_utils import isoformat_utc, utc_now
from .common.web import error, login_required, ok
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_users, list_tables
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _bootstrap_database(settings) -> None:
    db_config = getattr(settings, "DB_CONFIG")
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=getattr(settings, "SCHEMA_PATH"))
        ensure_default_users(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_default_users(db_config, demo_doctors=True)
        apply_seed_sql(db_config, seed_path=getattr(settings, "SEED_PATH"))
        logger.info("Demo seed ready")


def _register_core_routes(app: Flask, container: Container) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok(message="Server is running", data={"timestamp": isoformat_utc(utc_now())})

    @app.route("/uploads/<path:filename>", methods=["GET"], endpoint="uploads")
    @login_required
    def uploads(filename: str):
        return send_from_directory(container.photos.root, filename)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(_e):
        limit_mb = int(app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
        return error(f"File too large. Maximum size is {limit_mb}MB.", 400)

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith("/api/"):
            return error("API endpoint not found", 404)
        return e

    @app.errorhandler(Exception)
    def unhandled(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error("Internal server error", 500)


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_PHOTO_BYTES"))

    if container is None:
        _bootstrap_database(settings)
        container = build_container(settings=settings)

    location = container.location
    logger.info(
        "settings=%s authorized=(%s, %s) radius=%sm timezone=%s",
        settings_module,
        location.latitude,
        location.longitude,
        location.radius_meters,
        container.attendance_service.timezone,
    )

    register_users(app, container)
    register_attendance(app, container)
    _register_core_routes(app, container)

    return app
