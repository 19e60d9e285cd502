"""
Authentication Routes Module
============================

Handles:
- Login with login name and password
- Current user lookup

Users whose registration has not been approved cannot log in.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from memberportal.db.session import get_db
from memberportal.models.user import User
from memberportal.services.auth_service import AuthService
from memberportal.core.dependencies.auth import get_current_user
from memberportal.core.logging import get_logger
from memberportal.schemas import (
    LoginRequest,
    TokenResponse,
    CurrentUserResponse,
    ErrorResponse,
)

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"model": ErrorResponse, "description": "Authentication failed"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="User Login",
    description="Authenticate with login name and password and receive a bearer token.",
)
def login(
    request: Request,
    login_data: LoginRequest,
    db: Session = Depends(get_db),
) -> dict:
    """
    Authenticate user and return a JWT access token.

    Authentication errors are raised as MemberPortalException and
    rendered by the application exception handler.
    """
    auth_service = AuthService(db)
    client_ip = request.client.host if request.client else "unknown"

    user, tokens = auth_service.authenticate_user(
        login_name=login_data.login_name,
        password=login_data.password,
        ip_address=client_ip,
    )

    logger.info(
        "User logged in successfully",
        extra={
            "user_id": str(user.id),
            "organization_id": str(user.organization_id),
            "ip_address": client_ip,
        }
    )
    return tokens


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Current User",
)
def me(current_user: User = Depends(get_current_user)) -> User:
    """Return the authenticated user."""
    return current_user
