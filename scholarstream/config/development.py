from .base import BaseConfig


class DevelopmentConfig(BaseConfig):
    """
    Development configuration.
    """

    DEBUG = True
    ENVIRONMENT = "development"

    SECRET_KEY = BaseConfig.SECRET_KEY or "dev-secret-key"
    SITE_DOMAIN = BaseConfig.SITE_DOMAIN or "http://localhost:5173"
    LOG_LEVEL = "DEBUG"
