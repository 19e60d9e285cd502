"""
Authentication Schemas Module
=============================

Pydantic models for authentication request/response validation.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from memberportal.models.role_enum import Role


# ==========================
# Request Schemas
# ==========================

class LoginRequest(BaseModel):
    """Login credentials."""

    login_name: str = Field(
        ...,
        min_length=1,
        max_length=254,
        description="Login name"
    )
    password: str = Field(
        ...,
        min_length=1,
        description="User password"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "login_name": "jdoe",
                "password": "SecurePassword123!"
            }
        }
    )


# ==========================
# Response Schemas
# ==========================

class TokenResponse(BaseModel):
    """Access token issued after a successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class CurrentUserResponse(BaseModel):
    """Current authenticated user."""

    uuid: str = Field(..., description="Public user identifier")
    login_name: Optional[str] = Field(default=None, description="Login name")
    organization_id: int = Field(..., description="Home organization")
    role: Role = Field(..., description="User role")

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Error body returned by the exception handlers."""

    message: str = Field(..., description="Error message")
    details: Dict[str, Any] = Field(default_factory=dict, description="Additional error details")
