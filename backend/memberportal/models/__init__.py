"""
Model Package Initialization
============================

Ensures models are properly registered when imported by the application.

All SQLAlchemy ORM models are exported from this module.

Usage:
    from memberportal.models import User, Organization, Registration
"""

from .organization import Organization
from .user import User
from .registration import Registration
from .profile_field import ProfileField, UserData
from .preference import Preference
from .role_enum import Role

__all__ = [
    "Organization",
    "User",
    "Registration",
    "ProfileField",
    "UserData",
    "Preference",
    "Role",
]
