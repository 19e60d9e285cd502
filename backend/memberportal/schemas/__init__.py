"""
Schemas Package Initialization
==============================

Exports all Pydantic schemas for the application.

Usage:
    from memberportal.schemas import LoginRequest, TokenResponse, RegistrationCards
"""

# Auth schemas
from memberportal.schemas.auth import (
    LoginRequest,
    TokenResponse,
    CurrentUserResponse,
    ErrorResponse,
)

# Registration schemas
from memberportal.schemas.registration import (
    RegistrationRecord,
    CardAction,
    CardButton,
    RegistrationCard,
    NoRegistrations,
    RegistrationCards,
    RegistrationListResponse,
    RegistrationActionResponse,
)

# Installation schemas
from memberportal.schemas.installation import (
    InstallationStatusResponse,
    SqlScriptResponse,
    FixupResponse,
)

__all__ = [
    # Auth
    "LoginRequest",
    "TokenResponse",
    "CurrentUserResponse",
    "ErrorResponse",
    # Registration
    "RegistrationRecord",
    "CardAction",
    "CardButton",
    "RegistrationCard",
    "NoRegistrations",
    "RegistrationCards",
    "RegistrationListResponse",
    "RegistrationActionResponse",
    # Installation
    "InstallationStatusResponse",
    "SqlScriptResponse",
    "FixupResponse",
]
