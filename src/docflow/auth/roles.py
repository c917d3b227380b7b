"""User roles for DocFlow.

Two roles exist:
- ADMIN: replaces and removes documents unilaterally, reviews permission requests
- USER: owns documents, needs an admin-granted permission to replace or remove them
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles in DocFlow.

    Values are stored in the database and carried in bearer tokens verbatim.
    """
    USER = "USER"
    ADMIN = "ADMIN"


def is_admin(role) -> bool:
    """Check whether a role value (enum or raw string) is ADMIN.

    Examples:
        >>> is_admin(UserRole.ADMIN)
        True
        >>> is_admin("USER")
        False
    """
    try:
        return UserRole(role) == UserRole.ADMIN
    except ValueError:
        return False
