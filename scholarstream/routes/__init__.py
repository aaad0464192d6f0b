# scholarstream/routes/__init__.py
import logging

from . import applications, health, payments, reviews, scholarships, users

logger = logging.getLogger(__name__)

BLUEPRINTS = (
    health.bp,
    users.bp,
    scholarships.bp,
    applications.bp,
    reviews.bp,
    payments.bp,
)


def register_routes(app):
    """Register all API blueprints"""
    for bp in BLUEPRINTS:
        app.register_blueprint(bp)
    logger.info("Registered API blueprints", extra={"blueprints": [bp.name for bp in BLUEPRINTS]})
    return app
