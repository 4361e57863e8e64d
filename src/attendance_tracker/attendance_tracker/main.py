from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, send_from_directory

from config import get_settings_module

from .announcements.controller import register as register_announcements
from .attendance.controller import register as register_attendance
from .complaints.controller import register as register_complaints
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_BYTES", 16 * 1024 * 1024))

    upload_dir = Path(getattr(settings, "UPLOAD_DIR", REPO_ROOT / "uploads"))

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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_admin_user(
                db_config,
                username=getattr(settings, "ADMIN_USERNAME", "admin"),
                password=getattr(settings, "ADMIN_PASSWORD", "admin123"),
            )
            logger.info("admin account ready")

        container = build_container(
            db_config=db_config,
            upload_dir=str(upload_dir),
            tz_name=getattr(settings, "BUSINESS_TIMEZONE", "Asia/Jakarta"),
            cutover_hour=int(getattr(settings, "DAY_CUTOVER_HOUR", 4)),
            max_sessions=int(getattr(settings, "MAX_SESSIONS_PER_DAY", 5)),
        )

    @app.route("/uploads/<path:filename>", endpoint="uploads")
    def uploads(filename: str):
        return send_from_directory(upload_dir, filename)

    register_users(app, container)
    register_attendance(app, container)
    register_announcements(app, container)
    register_complaints(app, container)

    app.extensions["container"] = container
    return app
