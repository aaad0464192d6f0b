# scholarstream/auth/guards.py
"""
Route guards.

``require_auth`` verifies the bearer credential and binds
``g.principal_email``. ``require_role`` does the same and then re-reads the
principal's stored role; there is no role caching between requests.
"""

import logging
from functools import wraps

from flask import g, request

from ..domain.roles import Role, STAFF_ROLES
from ..errors import Forbidden, Unauthorized
from ..extensions import get_services
from .identity import IdentityVerificationError, extract_bearer_token

logger = logging.getLogger(__name__)


def authenticate():
    """Verify the request credential and return the principal email."""
    if "principal_email" in g:
        return g.principal_email

    token = extract_bearer_token(request.headers.get("Authorization"))
    if not token:
        raise Unauthorized()

    try:
        email = get_services().identity.verify(token)
    except IdentityVerificationError:
        raise Unauthorized()

    g.principal_email = email
    return email


def current_role():
    """Stored role of the authenticated principal (None when the user is unknown)."""
    email = authenticate()
    if "principal_role" not in g:
        g.principal_role = get_services().users.stored_role(email)
    return g.principal_role


def principal_is_staff():
    return current_role() in STAFF_ROLES


def require_auth(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        authenticate()
        return func(*args, **kwargs)
    return wrapper


def require_role(*allowed):
    """
    Allow the request only when the principal's stored role is one of ``allowed``.
    Use as: @require_role(Role.ADMIN) or @require_role(Role.ADMIN, Role.MODERATOR)
    """
    allowed_roles = frozenset(Role(r) for r in allowed)
    if not allowed_roles:
        raise ValueError("require_role needs at least one role")

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            role = current_role()
            if role not in allowed_roles:
                logger.warning(
                    "Role check failed",
                    extra={
                        "principal": g.principal_email,
                        "role": role.value if role else None,
                        "required": sorted(r.value for r in allowed_roles),
                    },
                )
                raise Forbidden()
            return func(*args, **kwargs)
        return wrapper
    return decorator


require_admin = require_role(Role.ADMIN)
require_moderator = require_role(Role.MODERATOR)
require_staff = require_role(Role.ADMIN, Role.MODERATOR)
