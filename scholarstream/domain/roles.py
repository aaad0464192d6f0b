from enum import Enum


class Role(str, Enum):
    STUDENT = "Student"
    MODERATOR = "Moderator"
    ADMIN = "Admin"

    @classmethod
    def parse(cls, value):
        """Return the Role for a stored/submitted string, or None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


STAFF_ROLES = frozenset({Role.ADMIN, Role.MODERATOR})
