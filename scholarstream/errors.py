# scholarstream/errors.py
import logging

from flask import jsonify, request
from pydantic import ValidationError
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from .config import ConfigurationError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 400
    kind = "bad_request"

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        body = {"success": False, "error": self.kind, "message": self.message}
        body.update(self.payload or {})
        return body


class BadRequest(ApiError):
    status_code = 400
    kind = "bad_request"


class Unauthorized(ApiError):
    status_code = 401
    kind = "unauthorized"

    def __init__(self, message="unauthorized access", **kwargs):
        super().__init__(message, **kwargs)


class Forbidden(ApiError):
    status_code = 403
    kind = "forbidden"

    def __init__(self, message="forbidden access", **kwargs):
        super().__init__(message, **kwargs)


class NotFound(ApiError):
    status_code = 404
    kind = "not_found"


class Conflict(ApiError):
    """A domain rule rejected the request, e.g. a duplicate submission."""

    status_code = 409
    kind = "conflict"


class UpstreamError(ApiError):
    """The document store or the payment gateway failed."""

    status_code = 500
    kind = "upstream_error"

    def __init__(self, message="Internal server error", **kwargs):
        super().__init__(message, **kwargs)


def _error_response(status_code, kind, message, **extra):
    body = {"success": False, "error": kind, "message": message}
    body.update(extra)
    return jsonify(body), status_code


def register_error_handlers(app):
    """Register all error handlers for the application"""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        log = logger.error if error.status_code >= 500 else logger.warning
        log(
            f"{error.__class__.__name__}: {error.message} - Path: {request.path}",
            extra={"status_code": error.status_code, "path": request.path},
        )
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        logger.warning(f"Validation failed - Path: {request.path}")
        details = [
            {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
            for e in error.errors()
        ]
        return _error_response(400, "validation_error", "Invalid request data", details=details)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        logger.info(f"{error.name}: {request.method} {request.path}")
        kind = error.name.lower().replace(" ", "_")
        return _error_response(error.code, kind, error.description)

    @app.errorhandler(PyMongoError)
    def handle_store_error(error):
        logger.error(f"Document store error - Path: {request.path}", exc_info=error)
        return _error_response(500, "upstream_error", "Internal server error")

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(error):
        logger.critical(f"Configuration error: {error}")
        return _error_response(500, "configuration_error", "Service is misconfigured")

    @app.errorhandler(Exception)
    def handle_exception(error):
        """
        Handles all unexpected server errors
        Prevents stack trace leakage in production
        """
        logger.error(f"Unhandled exception - Path: {request.path}", exc_info=error)
        return _error_response(500, "internal_error", "Internal server error")
