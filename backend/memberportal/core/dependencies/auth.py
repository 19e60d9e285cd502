"""
Authentication Dependencies Module
==================================

FastAPI dependencies for authentication and user extraction.

Usage:
    @router.get("/protected")
    def protected_route(user: User = Depends(get_current_user)):
        return {"user": user.login_name}
"""

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from memberportal.core.exceptions import AuthenticationError, exception_to_http_exception
from memberportal.core.logging import get_logger
from memberportal.db.session import get_db
from memberportal.models.user import User
from memberportal.services.auth_service import AuthService

# Initialize logger
logger = get_logger(__name__)


oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/auth/login",
    auto_error=True,
    description="OAuth2 token for authentication",
)


def get_current_user(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Validate JWT and return current user from database.

    Args:
        request: FastAPI request object
        token: JWT token from Authorization header
        db: Database session

    Returns:
        User model instance

    Raises:
        HTTPException: If authentication fails
    """
    auth_service = AuthService(db)

    try:
        user = auth_service.validate_access_token(token)
    except AuthenticationError as e:
        logger.warning(
            "Invalid token presented",
            extra={"reason": e.message, "path": request.url.path}
        )
        http_exc = exception_to_http_exception(e)
        http_exc.headers = {"WWW-Authenticate": "Bearer"}
        raise http_exc

    request.state.user_id = str(user.id)
    request.state.organization_id = str(user.organization_id)
    return user
