from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .container import Container, build_container, load_settings
from .core.logging_config import setup_logging
from .duties.controller import register as register_duties
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = load_settings(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ALLOW_NETID_LOGIN"] = bool(getattr(settings, "ALLOW_NETID_LOGIN", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), json_format=bool(getattr(settings, "LOG_JSON", False)))
    logger.info("[duty-roster] settings=%s", settings.__name__)

    if container is None:
        container = build_container(settings)

    register_users(app, container)
    register_duties(app, container)

    return app
