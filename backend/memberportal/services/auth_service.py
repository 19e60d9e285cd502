"""
Authentication Service Module
=============================

Authentication service handling:
- Password hashing using Argon2
- JWT access token creation
- Token decoding and validation
- Login of validated users

Security Features:
- Argon2id password hashing (memory-hard, resistant to GPU attacks)
- Issuer and audience validation
- Users with a pending registration cannot log in
"""

from datetime import datetime, timedelta, UTC
from typing import Optional, Tuple

from sqlalchemy.orm import Session
from jose import jwt, JWTError
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, Argon2Error

from memberportal.models.user import User
from memberportal.core.config import settings
from memberportal.core.exceptions import (
    AccountNotActiveError,
    InvalidCredentialsError,
    TokenExpiredError,
    TokenInvalidError,
)
from memberportal.core.logging import audit_logger, get_logger

# Initialize logger
logger = get_logger(__name__)


# ==========================
# Password Hasher Configuration
# ==========================

ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)


class AuthService:
    """
    Authentication service handling all auth-related operations.

    Usage:
        auth_service = AuthService(db)
        user, tokens = auth_service.authenticate_user(login_name, password)
    """

    def __init__(self, db: Session):
        """
        Initialize auth service with database session.

        Args:
            db: SQLAlchemy session
        """
        self.db = db

    # --------------------------
    # Password Utilities
    # --------------------------

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using Argon2id."""
        return ph.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Password to verify
            hashed_password: Stored hash from database

        Returns:
            True if password matches, False otherwise
        """
        if not hashed_password:
            return False
        try:
            ph.verify(hashed_password, plain_password)
            return True
        except VerifyMismatchError:
            return False
        except Argon2Error as e:
            logger.warning(
                "Password verification error",
                extra={"error": str(e)}
            )
            return False

    # --------------------------
    # Tokens
    # --------------------------

    @staticmethod
    def create_access_token(
        user_uuid: str,
        organization_id: int,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a JWT access token.

        Args:
            user_uuid: Public identifier of the user
            organization_id: Organization the token acts for
            expires_delta: Custom expiration time

        Returns:
            Encoded JWT access token
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

        now = datetime.now(UTC)
        payload = {
            "sub": user_uuid,
            "org_id": organization_id,
            "exp": now + expires_delta,
            "iat": now,
            "iss": settings.issuer,
            "aud": settings.audience,
        }

        return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)

    @staticmethod
    def decode_token(token: str) -> dict:
        """
        Decode and validate a JWT token.

        Raises:
            TokenExpiredError: If token has expired
            TokenInvalidError: If token is invalid
        """
        try:
            return jwt.decode(
                token,
                settings.secret_key,
                algorithms=[settings.algorithm],
                issuer=settings.issuer,
                audience=settings.audience,
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            logger.warning(
                "Token decode error",
                extra={"error": str(e)}
            )
            raise TokenInvalidError(reason=str(e))

    # --------------------------
    # Authentication Methods
    # --------------------------

    def authenticate_user(
        self,
        login_name: str,
        password: str,
        ip_address: Optional[str] = None,
    ) -> Tuple[User, dict]:
        """
        Authenticate a user with login name and password.

        Returns:
            Tuple of (User, token dict)

        Raises:
            InvalidCredentialsError: If credentials are invalid
            AccountNotActiveError: If the registration is still pending
        """
        user = self.db.query(User).filter(User.login_name == login_name).first()

        if not user or not self.verify_password(password, user.password):
            audit_logger.log_login_failure(
                login_name=login_name,
                ip_address=ip_address or "unknown",
                reason="invalid_credentials",
            )
            raise InvalidCredentialsError()

        if not user.valid:
            audit_logger.log_login_failure(
                login_name=login_name,
                ip_address=ip_address or "unknown",
                reason="registration_pending",
            )
            raise AccountNotActiveError()

        tokens = {
            "access_token": self.create_access_token(user.uuid, user.organization_id),
            "token_type": "bearer",
            "expires_in": settings.access_token_expire_minutes * 60,
        }
        return user, tokens

    def validate_access_token(self, token: str) -> User:
        """
        Validate an access token and return the user.

        Raises:
            TokenInvalidError: If token is invalid or the user is gone
            AccountNotActiveError: If the user is not valid
        """
        payload = self.decode_token(token)

        user_uuid = payload.get("sub")
        if not user_uuid:
            raise TokenInvalidError(reason="Invalid token payload")

        user = self.db.query(User).filter(User.uuid == user_uuid).first()
        if not user:
            raise TokenInvalidError(reason="User not found")

        if not user.valid:
            raise AccountNotActiveError()

        return user
