"""
User Model
==========

Users are created either by an administrator or by self registration.
A self registered user stays invalid (usr_valid = false) until an
administrator approves the registration.

Database Indexes:
- Primary key: usr_id
- Unique index: usr_uuid
- Unique index: usr_login_name
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from memberportal.db.base import Base
from memberportal.models.role_enum import Role

if TYPE_CHECKING:
    from memberportal.models.organization import Organization
    from memberportal.models.profile_field import UserData
    from memberportal.models.registration import Registration


class User(Base):
    """
    User entity.

    Attributes:
        id: Integer primary key
        uuid: Public identifier used in URLs
        organization_id: Home organization of the user
        login_name: Unique login name
        password: Argon2 password hash
        valid: False while the registration is pending
        role: User role (enum)
        created_at: Account creation timestamp
    """

    __tablename__ = "adm_users"

    def __init__(self, **kwargs):
        """Initialize User with Python-level defaults."""
        if "role" not in kwargs:
            kwargs["role"] = Role.MEMBER
        if "valid" not in kwargs:
            kwargs["valid"] = False
        super().__init__(**kwargs)

    id: Mapped[int] = mapped_column("usr_id", Integer, primary_key=True, autoincrement=True)

    uuid: Mapped[str] = mapped_column(
        "usr_uuid",
        String(36),
        nullable=False,
        unique=True,
        index=True,
        default=lambda: str(uuid.uuid4()),
    )

    organization_id: Mapped[int] = mapped_column(
        "usr_org_id",
        Integer,
        ForeignKey("adm_organizations.org_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="users",
    )

    login_name: Mapped[Optional[str]] = mapped_column(
        "usr_login_name",
        String(254),
        unique=True,
        nullable=True,
    )

    password: Mapped[Optional[str]] = mapped_column("usr_password", String(255), nullable=True)

    valid: Mapped[bool] = mapped_column("usr_valid", Boolean, default=False, nullable=False)

    role: Mapped[Role] = mapped_column(
        "usr_role",
        String(50),
        nullable=False,
        default=Role.MEMBER,
    )

    created_at: Mapped[datetime] = mapped_column(
        "usr_timestamp_create",
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    registrations: Mapped[List["Registration"]] = relationship(
        "Registration",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    data: Mapped[List["UserData"]] = relationship(
        "UserData",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, login_name={self.login_name}, valid={self.valid})>"

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excludes the password hash).

        Returns:
            Dictionary with user data
        """
        return {
            "id": self.id,
            "uuid": self.uuid,
            "login_name": self.login_name,
            "organization_id": self.organization_id,
            "role": self.role if isinstance(self.role, str) else self.role.value,
            "valid": self.valid,
        }
