# scholarstream/auth/identity.py
import base64
import json
import logging

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials

from ..config import ConfigurationError

logger = logging.getLogger(__name__)


class IdentityVerificationError(Exception):
    """Raised when a bearer credential cannot be verified."""


class IdentityVerifier:
    """Turns a bearer credential into the verified principal email."""

    def verify(self, token):
        raise NotImplementedError


def extract_bearer_token(header_value):
    """Return the token from an ``Authorization: Bearer <token>`` header, or None."""
    if not header_value:
        return None
    parts = header_value.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None
    return parts[1]


class FirebaseIdentityVerifier(IdentityVerifier):
    """
    Verifies Firebase ID tokens with firebase-admin.

    The service account is supplied as base64-encoded JSON (FB_SERVICE_KEY).
    The Firebase app is initialised lazily so that importing the module
    never needs credentials.
    """

    APP_NAME = "scholarstream"

    def __init__(self, service_key_b64):
        self.service_key_b64 = service_key_b64
        self._app = None

    def _get_app(self):
        if self._app is not None:
            return self._app
        if not self.service_key_b64:
            raise ConfigurationError("FB_SERVICE_KEY is not configured")
        try:
            service_account = json.loads(base64.b64decode(self.service_key_b64).decode("utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"FB_SERVICE_KEY is not valid base64 JSON: {e}")
        try:
            self._app = firebase_admin.get_app(self.APP_NAME)
        except ValueError:
            self._app = firebase_admin.initialize_app(
                credentials.Certificate(service_account), name=self.APP_NAME
            )
        return self._app

    def verify(self, token):
        app = self._get_app()
        try:
            decoded = firebase_auth.verify_id_token(token, app=app)
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
                firebase_auth.RevokedIdTokenError, firebase_auth.CertificateFetchError) as e:
            logger.info("Identity token rejected", extra={"reason": type(e).__name__})
            raise IdentityVerificationError(str(e))

        email = decoded.get("email")
        if not email:
            raise IdentityVerificationError("Token carries no email claim")
        return email
