"""
Role-Based Access Control (RBAC) Dependencies Module
=====================================================

FastAPI dependencies for role-based authorization.

Usage:
    @router.get("/registrations")
    def list_registrations(user: User = Depends(require_org_admin)):
        ...
"""

from fastapi import Depends, HTTPException, Request

from memberportal.models.user import User
from memberportal.models.role_enum import Role
from memberportal.core.dependencies.auth import get_current_user
from memberportal.core.exceptions import AuthorizationError, exception_to_http_exception
from memberportal.core.logging import audit_logger, get_logger

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Role Hierarchy
# =====================================

# Define role hierarchy (higher index = more permissions)
ROLE_HIERARCHY: list[Role] = [
    Role.MEMBER,
    Role.ORG_ADMIN,
    Role.SUPER_ADMIN,
]


def get_role_level(role: Role) -> int:
    """
    Get the hierarchy level for a role.

    Args:
        role: Role to get level for

    Returns:
        Integer level (higher = more permissions)
    """
    try:
        return ROLE_HIERARCHY.index(role)
    except ValueError:
        return -1


def has_role_or_higher(user_role: Role, required_role: Role) -> bool:
    """Check if user has the required role or higher."""
    return get_role_level(user_role) >= get_role_level(required_role)


def _deny(request: Request, current_user: User, minimum_role: Role, detail: str) -> HTTPException:
    audit_logger.log_unauthorized_access(
        user_id=str(current_user.id),
        resource=request.url.path,
        action=request.method,
    )
    logger.warning(
        "Role-based access denied",
        extra={
            "user_role": Role(current_user.role).value,
            "minimum_role": minimum_role.value,
            "path": request.url.path,
        }
    )
    return exception_to_http_exception(
        AuthorizationError(message=detail, details={"minimum_role": minimum_role.value})
    )


# =====================================
# Super Admin Only
# =====================================

def require_super_admin(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Dependency that requires SUPER_ADMIN role.

    Raises:
        HTTPException: If user is not a super admin
    """
    if not has_role_or_higher(current_user.role, Role.SUPER_ADMIN):
        raise _deny(request, current_user, Role.SUPER_ADMIN, "This action requires super admin privileges")
    return current_user


# =====================================
# Organization Admin or Higher
# =====================================

def require_org_admin(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Dependency that requires ORG_ADMIN or SUPER_ADMIN role.

    Raises:
        HTTPException: If user is not an org admin or higher
    """
    if not has_role_or_higher(current_user.role, Role.ORG_ADMIN):
        raise _deny(
            request, current_user, Role.ORG_ADMIN, "This action requires organization admin privileges"
        )
    return current_user
