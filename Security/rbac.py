"""
ROLE-BASED ACCESS CONTROL (RBAC)
================================
Secret disclosure is restricted to administrators.
"""

# FLOW:
# - require_admin() raises 403 unless the user role is admin.
# - enforce_rbac() checks request path prefixes against role rules.

from __future__ import annotations

from fastapi import HTTPException, status

ADMIN_ROLES = {"admin", "super_admin"}

ROLE_PATH_RULES = [
    ("/api/farming-accounts", {"admin", "super_admin", "manager", "user"}),
]


def _forbidden() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Access denied",
    )


def require_admin(user) -> None:
    if user.role not in ADMIN_ROLES:
        raise _forbidden()


def enforce_rbac(user, path: str) -> None:
    """Raise 403 if user role does not satisfy path-based access rules."""
    for prefix, roles in ROLE_PATH_RULES:
        if path.startswith(prefix):
            if user.role not in roles:
                raise _forbidden()
            return
