# scholarstream/services/tracking.py
import secrets
from datetime import datetime, timezone


def generate_tracking_id(prefix="PRCL", now=None):
    """Return ``<prefix>-YYYYMMDD-<6 upper hex chars>``."""
    now = now or datetime.now(timezone.utc)
    return f"{prefix}-{now:%Y%m%d}-{secrets.token_hex(3).upper()}"
