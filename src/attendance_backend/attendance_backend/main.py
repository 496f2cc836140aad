from __future__ import annotations

import importlib
import logging
import time
import uuid
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, request

from config import get_settings_module

from .common.responses import ok, register_error_handlers
from .container import Container, build_container
from .core.logging_config import configure_logging
from .database.bootstrap import SCHEMA_PATH, apply_schema, ensure_admin_user, ensure_base_roles, list_tables

from .attendance.controller import register as register_attendance
from .roles.controller import register as register_roles
from .schedules.controller import register as register_schedules
from .shifts.controller import register as register_shifts
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _bootstrap_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        ensure_base_roles(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        password = str(getattr(settings, "SEED_ADMIN_PASSWORD", "") or "")
        if not password:
            logger.warning("AUTO_SEED_DB is on but SEED_ADMIN_PASSWORD is empty; admin not seeded")
            return
        ensure_admin_user(
            db_config,
            username=str(getattr(settings, "SEED_ADMIN_USERNAME", "admin")),
            password=password,
            email=str(getattr(settings, "SEED_ADMIN_EMAIL", "admin@example.com")),
        )
        logger.info("Admin seed ready")


def _install_request_logging(app: Flask) -> None:
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

    @app.after_request
    def _log_request(response):
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        request_id = g.get("request_id", "-")
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "%s %s -> %d (%.1fms) [%s]",
            request.method,
            request.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response


def create_app(container: Optional[Container] = None, settings=None) -> Flask:
    """Application factory.

    ``container`` lets callers (tests) supply pre-wired services; when omitted
    the MySQL-backed container is built from the selected settings module.
    """

    load_dotenv(override=False)
    if settings is None:
        settings = importlib.import_module(get_settings_module())

    configure_logging(settings)

    app = Flask(__name__)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "Using settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _bootstrap_database(settings, db_config)
        container = build_container(db_config=db_config, settings=settings)

    app.extensions["token_service"] = container.tokens
    register_error_handlers(app)
    _install_request_logging(app)

    prefix = str(getattr(settings, "API_PREFIX", "") or "").rstrip("/")

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok("OK", {"status": "UP"})

    register_users(app, container, prefix=prefix)
    register_roles(app, container, prefix=prefix)
    register_shifts(app, container, prefix=prefix)
    register_schedules(app, container, prefix=prefix)
    register_attendance(app, container, prefix=prefix)

    return app
