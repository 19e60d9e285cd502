"""
Registration Model
==================

One row per self registration of a user for an organization.
The row is removed once the registration is assigned or deleted.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from memberportal.db.base import Base

if TYPE_CHECKING:
    from memberportal.models.user import User


class Registration(Base):
    """
    Pending registration of a user at an organization.

    Attributes:
        id: Integer primary key
        organization_id: Organization the user registered at
        user_id: Registered (not yet valid) user
        timestamp: Time of the registration
        validation_id: Token sent by email to confirm the address
    """

    __tablename__ = "adm_registrations"

    id: Mapped[int] = mapped_column("reg_id", Integer, primary_key=True, autoincrement=True)

    organization_id: Mapped[int] = mapped_column(
        "reg_org_id",
        Integer,
        ForeignKey("adm_organizations.org_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[int] = mapped_column(
        "reg_usr_id",
        Integer,
        ForeignKey("adm_users.usr_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    timestamp: Mapped[datetime] = mapped_column(
        "reg_timestamp",
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    validation_id: Mapped[Optional[str]] = mapped_column("reg_validation_id", String(50), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("reg_org_id", "reg_usr_id", name="uq_registrations_org_usr"),
    )

    def __repr__(self) -> str:
        return f"<Registration(id={self.id}, user_id={self.user_id}, organization_id={self.organization_id})>"
