from .base import BaseConfig


class TestingConfig(BaseConfig):
    """
    Configuration used by the test suite. External collaborators are
    injected by the tests, so no credentials are needed.
    """

    TESTING = True
    ENVIRONMENT = "testing"

    SECRET_KEY = "test-secret-key"
    MONGO_URI = "mongodb://localhost:27017"
    MONGO_DB_NAME = "scholarStreamTestDB"
    STRIPE_SECRET_KEY = "sk_test_mock"
    SITE_DOMAIN = "http://testserver"
    LATEST_SCHOLARSHIPS_LIMIT = 8

    RATELIMIT_ENABLED = False
    LOG_LEVEL = "WARNING"
    SENTRY_DSN = None
