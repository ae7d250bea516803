from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .core.exceptions import DomainError
from .courses.controller import register as register_courses
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports
from .students.controller import register as register_students

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s : %(message)s"


def setup_logging(app: Flask, level: str) -> None:
    logging.basicConfig(format=LOG_FORMAT, level=level.upper())
    app.logger.setLevel(level.upper())


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"error": str(e), "code": e.code}), e.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description, "code": e.name}), e.code

    @app.errorhandler(Exception)
    def handle_exception(e: Exception):
        app.logger.error("Unhandled exception: %s", e, exc_info=True)
        message = str(e) if app.debug else "Internal server error"
        return jsonify({"error": message, "code": "internal_error"}), 500


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PUBLIC_BASE_URL"] = getattr(settings, "PUBLIC_BASE_URL", "") or ""

    setup_logging(app, getattr(settings, "LOG_LEVEL", "INFO"))
    register_error_handlers(app)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(db_config=db_config)

    app.extensions["classroom_attendance"] = container

    register_courses(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
