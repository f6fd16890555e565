"""Provides an app factory for an example session-backed application."""

from flask import Flask

from . import ext, routes
from .app_logging import setup_logger


def create_web_app() -> Flask:
    """Initialize an application that keeps its sessions in Cassandra."""
    app = Flask('cassandra_sessions')
    app.config.from_pyfile('config.py')
    setup_logger(app.config['LOGLEVEL'])

    ext.init_app(app)
    app.register_blueprint(routes.blueprint)
    return app
