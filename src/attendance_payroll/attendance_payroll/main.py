from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, settings_dict

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_admin, list_tables
from .employees.controller import register as register_employees
from .payroll.controller import register as register_payroll
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. Pass ``container`` to run on pre-built (e.g. in-memory) collaborators."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = settings_dict(importlib.import_module(settings_module))
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    logging.basicConfig(
        level=settings.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("Settings module: %s", settings_module)

    if container is None:
        db_config = settings["DB_CONFIG"]
        logger.info(
            "Database: %s@%s:%s/%s",
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if settings.get("AUTO_INIT_DB"):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
            if settings.get("ADMIN_EMAIL") and settings.get("ADMIN_PASSWORD"):
                ensure_admin(
                    db_config,
                    email=settings["ADMIN_EMAIL"],
                    password=settings["ADMIN_PASSWORD"],
                    name=settings.get("ADMIN_NAME") or "Administrator",
                )

        container = build_container(db_config=db_config, settings=settings)
        container.scheduler.start()

    app.extensions["container"] = container
    register_error_handlers(app)
    register_employees(app, container)
    register_shifts(app, container)
    register_attendance(app, container)
    register_payroll(app, container)

    return app
