"""Employee Tracker package.

Organized by feature modules (employees, recipients, attendance, dispatch,
tracking, ...) with a thin Flask controller layer over service and
repository layers.
"""
from __future__ import annotations

import importlib
import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, render_template
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_settings_module

from .attendance.controller import register as register_records
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .core.logging_setup import configure_logging
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_migrations, apply_schema, ensure_admin_user, list_tables
from .employees.controller import register as register_employees
from .recipients.controller import register as register_recipients
from .tracking.controller import register as register_tracking
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _init_database(settings, db_config: dict) -> None:
    schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    apply_migrations(db_config)
    ensure_admin_user(
        db_config,
        username=getattr(settings, "ADMIN_USERNAME", None),
        password=getattr(settings, "ADMIN_PASSWORD", None),
        strict=bool(getattr(settings, "STRICT_ADMIN_PASSWORD", False)),
    )
    logger.info("schema ready (tables=%s)", len(list_tables(db_config)))


def _should_start_scheduler(app: Flask, settings) -> bool:
    if not bool(getattr(settings, "SCHEDULER_ENABLED", False)):
        return False
    # the debug reloader imports the app twice; only the child serves
    return not app.debug or os.environ.get("WERKZEUG_RUN_MAIN") == "true"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = not app.config["DEBUG"] and not app.config["TESTING"]
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            _init_database(settings, db_config)
        container = build_container(db_config=db_config, settings=settings)

    register_users(app, container)
    register_dashboard(app, container)
    register_employees(app, container)
    register_recipients(app, container)
    register_records(app, container)
    register_tracking(app, container)

    @app.errorhandler(404)
    def not_found(_e):
        return render_template("error.html", title="Not Found", message="The page you requested does not exist."), 404

    if _should_start_scheduler(app, settings):
        container.dispatch_scheduler.start()

    app.extensions["employee_tracker"] = container
    return app
