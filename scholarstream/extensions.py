# scholarstream/extensions.py
"""
Flask extensions and the per-app service container.
"""

import logging

from flask import current_app
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

logger = logging.getLogger(__name__)

# Initialize extensions
cors = CORS()
limiter = Limiter(key_func=get_remote_address)

EXTENSION_KEY = "scholarstream"


def init_extensions(app):
    """Initialize CORS and rate limiting from app config."""
    cors.init_app(
        app,
        origins=app.config.get("CORS_ORIGINS", ["*"]),
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    )
    logger.info("CORS initialized", extra={"origins": app.config.get("CORS_ORIGINS")})

    app.config.setdefault("RATELIMIT_DEFAULT", "200 per minute")
    limiter.init_app(app)
    logger.info(
        "Rate limiter initialized",
        extra={"enabled": app.config.get("RATELIMIT_ENABLED", True)},
    )


def register_services(app, services):
    app.extensions[EXTENSION_KEY] = services


def get_services():
    """Return the service container bound to the current app."""
    return current_app.extensions[EXTENSION_KEY]
