from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .notices.controller import register as register_notices
from .students.controller import register as register_students
from .subjects.controller import register as register_subjects


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger = logging.getLogger("tutor_attendance")
    logger.info("settings=%s api=%s", settings_module, getattr(settings, "API_BASE_URL", None))

    if container is None:
        container = build_container(settings=settings)

    register_auth(app, container)
    register_attendance(app, container)
    register_students(app, container)
    register_subjects(app, container)
    register_notices(app, container)

    return app
