"""Access to application configuration and globals."""

from typing import Any, Mapping, Optional
import os

from flask import Flask, current_app, g, has_app_context


def get_application_config(app: Optional[Flask] = None) -> Mapping[str, Any]:
    """
    Get the configuration of ``app``, or of the current application.

    Falls back to ``os.environ`` when there is no application context.
    """
    if app is not None:
        return app.config
    if has_app_context():
        return current_app.config
    return os.environ


def get_application_global() -> Optional[Any]:
    """Get the application global (:data:`flask.g`), if there is one."""
    if has_app_context():
        return g
    return None
