# scholarstream/app_factory.py
"""
Flask application factory.

Collaborators (document store, identity verifier, payment gateway) are built
from configuration unless passed in, which is how tests swap in in-memory
replacements.
"""

import logging
from typing import Optional

import sentry_sdk
from flask import Flask
from sentry_sdk.integrations.flask import FlaskIntegration

from .auth.identity import FirebaseIdentityVerifier
from .config import ConfigurationError, get_config
from .db import Store
from .errors import register_error_handlers
from .extensions import init_extensions, register_services
from .logging_config import setup_logging
from .middleware.request_id import init_request_id_middleware
from .routes import register_routes
from .services import StripeGateway, build_services

logger = logging.getLogger(__name__)


def setup_sentry(app: Flask) -> None:
    """Initialize Sentry error tracking"""
    sentry_dsn = app.config.get("SENTRY_DSN")
    if not sentry_dsn:
        return
    sentry_sdk.init(
        dsn=sentry_dsn,
        integrations=[FlaskIntegration()],
        traces_sample_rate=0.1,
        environment=app.config.get("ENVIRONMENT"),
        release=app.config.get("APP_VERSION"),
        send_default_pii=False,
    )
    logger.info("Sentry error tracking initialized")


def validate_settings(config_class) -> None:
    missing = config_class.validate()
    if missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")


def create_app(
    config_name: Optional[str] = None,
    store=None,
    identity_verifier=None,
    payment_gateway=None,
) -> Flask:
    config_class = get_config(config_name)
    validate_settings(config_class)

    app = Flask(__name__)
    app.config.from_object(config_class)

    setup_logging(app)
    setup_sentry(app)
    init_request_id_middleware(app)
    init_extensions(app)
    register_error_handlers(app)

    if store is None:
        store = Store.from_config(app.config)
    if identity_verifier is None:
        identity_verifier = FirebaseIdentityVerifier(app.config.get("FB_SERVICE_KEY"))
    if payment_gateway is None:
        payment_gateway = StripeGateway(
            app.config.get("STRIPE_SECRET_KEY"),
            currency=app.config.get("STRIPE_CURRENCY", "usd"),
        )

    if app.config.get("MONGO_ENSURE_INDEXES", True):
        store.ensure_indexes()

    register_services(app, build_services(app.config, store, identity_verifier, payment_gateway))
    register_routes(app)

    logger.info(
        "Application started",
        extra={"environment": app.config.get("ENVIRONMENT"), "database": app.config.get("MONGO_DB_NAME")},
    )
    return app
