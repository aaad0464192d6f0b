from .base import BaseConfig


class ProductionConfig(BaseConfig):
    """
    Production configuration.
    """

    DEBUG = False
    ENVIRONMENT = "production"

    # MUST be set via environment variables in real production
    REQUIRED_SETTINGS = (
        "SECRET_KEY",
        "FB_SERVICE_KEY",
        "STRIPE_SECRET_KEY",
        "SITE_DOMAIN",
    )
