from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig
from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .budget.controller import register as register_budget
from .salary.controller import register as register_salary
from .workers.controller import register as register_workers

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory; pass a prebuilt container to skip database setup."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            lock_timeout_seconds=float(getattr(settings, "LEDGER_LOCK_TIMEOUT_SECONDS", 5.0)),
        )

    register_workers(app, container)
    register_attendance(app, container)
    register_salary(app, container)
    register_budget(app, container)

    return app
