import logging

from flask import Flask

from cafe_app.extensions import db, migrate, cors
from cafe_app.routes import register_routes
from cafe_app.services.clock import init_clock
from cafe_app.utils.db import enable_sqlite_foreign_keys
from cafe_app.cli import cafe_cli
from cafe_app import models  # noqa: F401  (register tables with the metadata)


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("cafe_app").setLevel(level)
    app.logger.setLevel(level)


def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app)

    # Initialize database
    db.init_app(app)
    enable_sqlite_foreign_keys(app)

    # Initialize Flask-Migrate
    migrate.init_app(app, db)

    # CORS Configuration
    cors.init_app(app,
                  origins=app.config.get("CORS_ORIGINS", []),
                  supports_credentials=True,
                  allow_headers=["Content-Type", "Authorization"],
                  methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                  expose_headers=["Content-Type", "Authorization"])

    init_clock(app)
    register_routes(app)
    app.cli.add_command(cafe_cli)

    return app
