# scholarstream/routes/health.py
import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify
from pymongo.errors import PyMongoError

from ..extensions import get_services, limiter

logger = logging.getLogger(__name__)

bp = Blueprint("health", __name__)


@bp.route("/", methods=["GET"])
@limiter.exempt
def index():
    return "ScholarStream server is running"


@bp.route("/health", methods=["GET"])
@limiter.exempt
def health_check():
    """Liveness plus a document store round trip."""
    checks = {"api": "ok"}
    status_code = 200
    try:
        get_services().store.ping()
        checks["database"] = "ok"
    except PyMongoError as e:
        logger.error("Health check: document store unreachable", extra={"error": str(e)})
        checks["database"] = "unreachable"
        status_code = 503

    return jsonify({
        "success": status_code == 200,
        "status": "healthy" if status_code == 200 else "degraded",
        "service": current_app.config.get("APP_NAME"),
        "version": current_app.config.get("APP_VERSION"),
        "environment": current_app.config.get("ENVIRONMENT"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }), status_code
