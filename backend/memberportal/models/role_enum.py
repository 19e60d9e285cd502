"""
Role Enumeration Module
=======================

Defines all valid roles in the system.

Security Purpose:
- Prevents arbitrary role injection
- Enforces strict backend validation
"""

from enum import Enum


class Role(str, Enum):
    """
    System-wide allowed roles.

    ORG_ADMIN may approve registrations of its organization,
    SUPER_ADMIN may additionally run installation tasks.
    """

    SUPER_ADMIN = "SUPER_ADMIN"
    ORG_ADMIN = "ORG_ADMIN"
    MEMBER = "MEMBER"
