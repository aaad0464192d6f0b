from .guards import (
    authenticate,
    current_role,
    principal_is_staff,
    require_admin,
    require_auth,
    require_moderator,
    require_role,
    require_staff,
)
