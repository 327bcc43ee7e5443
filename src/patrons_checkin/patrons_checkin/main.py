from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_manager, list_tables

from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import (
    DEFAULT_MAIL_SENDER,
    DEFAULT_RECAPTCHA_THRESHOLD,
    DEFAULT_SESSION_HEADER,
    DEFAULT_UNSUBSCRIBE_URL,
)
from .area_services.controller import register as register_area_services
from .checkins.controller import register as register_checkins
from .managers.controller import register as register_managers
from .newsletter.controller import register as register_newsletter
from .venues.controller import register as register_venues

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Tests pass a prebuilt ``container`` (in-memory repositories); otherwise
    the MySQL-backed one is built from the active settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_HEADER"] = getattr(settings, "SESSION_HEADER", DEFAULT_SESSION_HEADER)
    app.config["PUBLIC_CHECKIN_URL"] = getattr(
        settings, "PUBLIC_CHECKIN_URL", "http://localhost:3000/{venue}/{area}"
    )

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    proxy_hops = int(getattr(settings, "PROXY_FIX_HOPS", 0))
    if proxy_hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxy_hops, x_proto=proxy_hops, x_host=proxy_hops)

    if container is None:
        logger.info(
            "Starting patrons-checkin. [settings: %s, db: %s@%s:%s/%s]",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready. [tables: %s]", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_manager(db_config)
            logger.info("Demo seed ready.")

        newsletter_config = {
            "recaptcha_secret": getattr(settings, "RECAPTCHA_SECRET", ""),
            "recaptcha_threshold": getattr(settings, "RECAPTCHA_THRESHOLD", DEFAULT_RECAPTCHA_THRESHOLD),
            "unsubscribe_url": getattr(settings, "UNSUBSCRIBE_URL", DEFAULT_UNSUBSCRIBE_URL),
            "smtp_host": getattr(settings, "SMTP_HOST", ""),
            "smtp_port": getattr(settings, "SMTP_PORT", 587),
            "smtp_user": getattr(settings, "SMTP_USER", ""),
            "smtp_password": getattr(settings, "SMTP_PASSWORD", ""),
            "mail_sender": getattr(settings, "MAIL_SENDER", DEFAULT_MAIL_SENDER),
        }
        container = build_container(db_config=db_config, newsletter_config=newsletter_config)

    register_error_handlers(app)

    register_managers(app, container)
    register_venues(app, container)
    register_area_services(app, container)
    register_checkins(app, container)
    register_newsletter(app, container)

    return app
