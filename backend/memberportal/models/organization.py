"""
Organization Model
==================

Represents an organization sharing the installation.

Each organization:
- Has its own registrations and preferences
- May define its own profile fields
- Acts as a data boundary for administrators

Database Indexes:
- Primary key: org_id
- Unique index: org_shortname
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from memberportal.db.base import Base

if TYPE_CHECKING:
    from memberportal.models.user import User


class Organization(Base):
    """
    Organization entity.

    Attributes:
        id: Integer primary key
        uuid: Public identifier
        shortname: Unique short name used in URLs
        longname: Display name
        homepage: Organization homepage URL
        created_at: Creation timestamp
    """

    __tablename__ = "adm_organizations"

    id: Mapped[int] = mapped_column("org_id", Integer, primary_key=True, autoincrement=True)

    uuid: Mapped[str] = mapped_column(
        "org_uuid",
        String(36),
        nullable=False,
        unique=True,
        default=lambda: str(uuid.uuid4()),
    )

    shortname: Mapped[str] = mapped_column(
        "org_shortname",
        String(10),
        nullable=False,
        unique=True,
        index=True,
    )

    longname: Mapped[str] = mapped_column("org_longname", String(60), nullable=False)

    homepage: Mapped[str] = mapped_column("org_homepage", String(60), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        "org_timestamp_create",
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    users: Mapped[List["User"]] = relationship(
        "User",
        back_populates="organization",
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, shortname={self.shortname})>"
