# backend/orderhub/__init__.py
import logging

from flask import Flask

from .config import Config
from .extensions import db, migrate


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Use cases report start/success/failure to this collaborator
    from .observability import LoggingObserver
    app.extensions.setdefault("orderhub.observer", LoggingObserver())

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
