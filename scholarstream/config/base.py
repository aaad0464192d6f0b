import os


class ConfigurationError(Exception):
    """
    Raised when an invalid or unsupported configuration is requested.
    """
    pass


def _env_int(name, default):
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def build_mongo_uri():
    """
    Resolve the MongoDB connection string.

    MONGO_URI wins when set; otherwise the SRV URI is composed from
    DB_USER / DB_PASS / DB_HOST.
    """
    uri = os.getenv("MONGO_URI")
    if uri:
        return uri

    user = os.getenv("DB_USER")
    password = os.getenv("DB_PASS")
    host = os.getenv("DB_HOST")
    if user and password and host:
        return f"mongodb+srv://{user}:{password}@{host}/?retryWrites=true&w=majority"

    return "mongodb://localhost:27017"


class BaseConfig:
    """
    Base configuration shared by all environments.
    """

    # Flask
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")

    # Application
    APP_NAME = "ScholarStream API"
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
    ENVIRONMENT = "base"

    # Document store
    MONGO_URI = build_mongo_uri()
    MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "scholarStreamDB")
    MONGO_SERVER_SELECTION_TIMEOUT_MS = _env_int("MONGO_SERVER_SELECTION_TIMEOUT_MS", 5000)
    MONGO_ENSURE_INDEXES = _env_bool("MONGO_ENSURE_INDEXES", True)

    # Identity provider (Firebase service account, base64-encoded JSON)
    FB_SERVICE_KEY = os.getenv("FB_SERVICE_KEY")

    # Payments
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_CURRENCY = os.getenv("STRIPE_CURRENCY", "usd")
    SITE_DOMAIN = os.getenv("SITE_DOMAIN")
    TRACKING_ID_PREFIX = os.getenv("TRACKING_ID_PREFIX", "PRCL")

    # Catalog
    LATEST_SCHOLARSHIPS_LIMIT = _env_int("LATEST_SCHOLARSHIPS_LIMIT", 8)
    MAX_PAGE_SIZE = _env_int("MAX_PAGE_SIZE", 50)

    # CORS
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Rate limiting (Flask-Limiter)
    RATELIMIT_ENABLED = _env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_REQUESTS = _env_bool("LOG_REQUESTS", False)

    # Error tracking
    SENTRY_DSN = os.getenv("SENTRY_DSN")

    REQUIRED_SETTINGS = ()

    @classmethod
    def validate(cls):
        """Return the names of required settings that are missing."""
        return [name for name in cls.REQUIRED_SETTINGS if not getattr(cls, name, None)]
