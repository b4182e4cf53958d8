from __future__ import annotations

import importlib
import logging
from datetime import date
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .config import get_settings_module
from .container import build_container
from .people.controller import register as register_people
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .storage.bootstrap import ensure_demo_data, migrate_legacy_passwords

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None, **overrides) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["HISTORY_LIMIT"] = int(getattr(settings, "HISTORY_LIMIT", 30))
    app.config.update(overrides)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store_path = app.config.get("STORE_PATH", getattr(settings, "STORE_PATH", None))
    container = build_container(
        store_path=store_path,
        admin_username=getattr(settings, "ADMIN_USERNAME"),
        admin_password=getattr(settings, "ADMIN_PASSWORD"),
        code_prefix=getattr(settings, "CODE_PREFIX", "ATTENDANCE_QR"),
        code_window_ms=int(getattr(settings, "CODE_WINDOW_MS", 15000)),
    )
    logger.info("settings=%s store=%s", settings_module, store_path or "<memory>")

    migrate_legacy_passwords(container.store)

    if app.config.get("AUTO_SEED_DEMO", getattr(settings, "AUTO_SEED_DEMO", False)):
        ensure_demo_data(
            container.store,
            today=date.today(),
            student_password=getattr(settings, "DEMO_STUDENT_PASSWORD", "student123"),
        )

    register_error_handlers(app)
    register_people(app, container)
    register_attendance(app, container)
    register_sessions(app, container)
    register_reports(app, container)

    app.extensions["qr_attendance"] = container
    return app
