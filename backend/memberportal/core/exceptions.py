"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Usage:
    raise AuthenticationError("Invalid credentials")
    raise RegistrationNotFoundError(identifier=user_uuid)
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class MemberPortalException(Exception):
    """
    Base exception class for the MemberPortal application.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ==========================
# Authentication Exceptions
# ==========================

class AuthenticationError(MemberPortalException):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Could not validate credentials",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""

    def __init__(self):
        super().__init__(message="Invalid login name or password")


class TokenExpiredError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, token_type: str = "access"):
        super().__init__(
            message=f"{token_type.capitalize()} token has expired",
            details={"token_type": token_type}
        )


class TokenInvalidError(AuthenticationError):
    """Raised when a JWT token is invalid."""

    def __init__(self, reason: str = "Invalid token"):
        super().__init__(
            message="Invalid token",
            details={"reason": reason}
        )


class AccountNotActiveError(AuthenticationError):
    """Raised when a registration has not been approved yet."""

    def __init__(self):
        super().__init__(
            message="Your registration has not been approved by an administrator yet."
        )


# ==========================
# Authorization Exceptions
# ==========================

class AuthorizationError(MemberPortalException):
    """Raised when user lacks required permissions."""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


# ==========================
# Resource Exceptions
# ==========================

class NotFoundError(MemberPortalException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", identifier: Optional[str] = None):
        message = f"{resource} not found"
        details = {"resource": resource}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class RegistrationNotFoundError(NotFoundError):
    """Raised when no pending registration exists for a user in the organization."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Registration", identifier=identifier)


class ProfileFieldNotFoundError(NotFoundError):
    """Raised when a profile field name cannot be resolved for the organization."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Profile field", identifier=identifier)


# ==========================
# Installation Exceptions
# ==========================

class SqlScriptError(MemberPortalException):
    """Raised when a SQL script file cannot be read."""

    def __init__(self, path: str, reason: str = "SQL file not readable"):
        super().__init__(
            message=reason,
            details={"path": path},
        )


# ==========================
# Helper Functions
# ==========================

def exception_to_http_exception(exc: MemberPortalException) -> HTTPException:
    """
    Convert a MemberPortalException to FastAPI HTTPException.

    Args:
        exc: MemberPortalException instance

    Returns:
        HTTPException with appropriate status code and detail
    """
    return HTTPException(
        status_code=exc.status_code,
        detail={
            "message": exc.message,
            "details": exc.details,
        }
    )
